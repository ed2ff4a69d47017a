"""
HTTP API tests.
"""


class TestAuthRoutes:

    def test_signup_returns_token_and_user(self, api, client):
        auth = api.signup("riya@igdtuw.ac.in", name="Riya")
        assert auth["tokenType"] == "bearer"
        assert auth["user"]["email"] == "riya@igdtuw.ac.in"
        assert auth["user"]["isAdmin"] is False
        r = client.get("/auth/me", headers=api.headers(auth))
        assert r.status_code == 200
        assert r.json()["name"] == "Riya"

    def test_signup_then_login(self, api):
        api.signup("riya@igdtuw.ac.in", name="Riya", password="pw-1")
        auth = api.login("riya@igdtuw.ac.in", "pw-1")
        assert auth["user"]["name"] == "Riya"

    def test_foreign_domain_rejected(self, client):
        r = client.post("/auth/signup", json={"email": "riya@gmail.com", "name": "Riya", "password": "pw"})
        assert r.status_code == 400
        assert "@igdtuw.ac.in" in r.json()["detail"]

    def test_duplicate_signup(self, api, client):
        api.signup("riya@igdtuw.ac.in")
        r = client.post("/auth/signup", json={"email": "riya@igdtuw.ac.in", "name": "X", "password": "pw"})
        assert r.status_code == 400

    def test_unknown_account(self, client):
        r = client.post("/auth/login", json={"email": "ghost@igdtuw.ac.in", "password": "pw"})
        assert r.status_code == 404

    def test_wrong_password(self, api, client):
        api.signup("riya@igdtuw.ac.in", password="right")
        r = client.post("/auth/login", json={"email": "riya@igdtuw.ac.in", "password": "wrong"})
        assert r.status_code == 401

    def test_admin_login(self, api):
        auth = api.login("admin@igdtuw.ac.in", "password123")
        assert auth["user"]["isAdmin"] is True

    def test_invalid_token(self, client):
        r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert r.status_code == 401

    def test_logout(self, api, client):
        headers = api.student_headers()
        r = client.post("/auth/logout", headers=headers)
        assert r.status_code == 200
        assert client.app.state.session_service.current_user is None

    def test_token_rejected_after_logout(self, api, client):
        headers = api.student_headers()
        assert client.post("/auth/logout", headers=headers).status_code == 200
        assert client.get("/auth/me", headers=headers).status_code == 401
        r = client.post("/posts/", json={"title": "Hi", "content": "There", "tags": ["General"]}, headers=headers)
        assert r.status_code == 401
        assert client.post("/auth/logout", headers=headers).status_code == 401

    def test_logout_leaves_other_users_signed_in(self, api, client):
        riya = api.headers(api.signup("riya@igdtuw.ac.in", name="Riya"))
        meera = api.headers(api.signup("meera@igdtuw.ac.in", name="Meera"))
        client.post("/auth/logout", headers=riya)
        assert client.get("/auth/me", headers=riya).status_code == 401
        r = client.get("/auth/me", headers=meera)
        assert r.status_code == 200
        assert r.json()["name"] == "Meera"
        assert client.app.state.session_service.current_user.email == "meera@igdtuw.ac.in"

    def test_login_again_after_logout(self, api, client):
        headers = api.headers(api.signup("riya@igdtuw.ac.in", password="pw-1"))
        client.post("/auth/logout", headers=headers)
        fresh = api.headers(api.login("riya@igdtuw.ac.in", "pw-1"))
        assert client.get("/auth/me", headers=fresh).status_code == 200


class TestPostRoutes:

    def test_create_and_fetch(self, api, client):
        headers = api.student_headers()
        post = api.create_post(headers, title="Bus timings", tags=["General"])
        assert post["upvotes"] == 0
        assert post["userName"] == "Student"
        r = client.get(f"/posts/{post['id']}")
        assert r.status_code == 200
        assert r.json()["title"] == "Bus timings"

    def test_anonymous_post(self, api):
        post = api.create_post(api.student_headers(), isAnonymous=True)
        assert post["isAnonymous"] is True
        assert post["userName"] is None

    def test_empty_tags_rejected(self, api, client):
        r = client.post("/posts/", json={"title": "Hi", "content": "There", "tags": []}, headers=api.student_headers())
        assert r.status_code == 422

    def test_blank_title_rejected(self, api, client):
        r = client.post("/posts/", json={"title": " ", "content": "There", "tags": ["General"]}, headers=api.student_headers())
        assert r.status_code == 422

    def test_create_requires_login(self, client):
        r = client.post("/posts/", json={"title": "Hi", "content": "There", "tags": ["General"]})
        assert r.status_code == 401

    def test_upvote_toggle(self, api, client):
        headers = api.student_headers()
        assert client.post("/posts/post1/upvote", headers=headers).json()["upvotes"] == 16
        second = client.post("/posts/post1/upvote", headers=headers).json()
        assert second["upvotes"] == 15
        assert second["userUpvoted"] is False

    def test_upvote_unknown(self, api, client):
        r = client.post("/posts/missing/upvote", headers=api.student_headers())
        assert r.status_code == 404

    def test_flag(self, api, client):
        headers = api.student_headers()
        r = client.post("/posts/post2/flag", headers=headers)
        assert r.status_code == 200
        assert r.json()["isFlagged"] is True
        assert client.post("/posts/post2/flag", headers=headers).json()["upvotes"] == 25

    def test_delete_requires_admin(self, api, client):
        r = client.delete("/posts/post1", headers=api.student_headers())
        assert r.status_code == 403
        assert client.get("/posts/post1").status_code == 200

    def test_admin_delete(self, api, client):
        headers = api.admin_headers()
        assert client.delete("/posts/post1", headers=headers).status_code == 200
        assert client.get("/posts/post1").status_code == 404
        assert client.delete("/posts/post1", headers=headers).status_code == 404

    def test_flagged_post_hidden_from_non_admins(self, api, client):
        student = api.student_headers()
        client.post("/posts/post2/flag", headers=student)
        assert client.get("/posts/post2").status_code == 404
        assert client.get("/posts/post2", headers=student).status_code == 404
        r = client.get("/posts/post2", headers=api.admin_headers())
        assert r.status_code == 200
        assert r.json()["isFlagged"] is True


class TestFeedRoutes:

    def test_default_sort_is_most_upvoted(self, client):
        r = client.get("/browse/feed")
        assert r.status_code == 200
        assert [p["upvotes"] for p in r.json()] == [25, 15, 5]

    def test_ascending(self, client):
        r = client.get("/browse/feed", params={"direction": "asc"})
        assert [p["upvotes"] for p in r.json()] == [5, 15, 25]

    def test_search_and_tags(self, client):
        r = client.get("/browse/feed", params={"search": "google"})
        assert [p["id"] for p in r.json()] == ["post2"]
        r = client.get("/browse/feed", params=[("tags", "academics"), ("tags", "Announcements")])
        assert {p["id"] for p in r.json()} == {"post1", "post3"}

    def test_flagged_only_visible_to_admin(self, api, client):
        client.post("/posts/post2/flag", headers=api.student_headers())
        assert "post2" not in [p["id"] for p in client.get("/browse/feed").json()]
        admin_feed = client.get("/browse/feed", headers=api.admin_headers()).json()
        assert "post2" in [p["id"] for p in admin_feed]

    def test_invalid_sort(self, client):
        assert client.get("/browse/feed", params={"sort": "random"}).status_code == 422


class TestCommunityRoutes:

    def test_list_and_defaults(self, client):
        assert len(client.get("/communities/").json()) == 5
        defaults = client.get("/communities/defaults").json()
        assert [c["name"] for c in defaults][0] == "Placements"
        assert defaults[0]["memberCount"] == 120

    def test_create(self, api, client):
        r = client.post("/communities/", json={"name": "Coding Club", "description": "Contests"}, headers=api.student_headers())
        assert r.status_code == 201
        assert r.json()["memberCount"] == 1
        assert len(client.get("/communities/").json()) == 6

    def test_name_collision(self, api, client):
        r = client.post("/communities/", json={"name": "general", "description": "Again"}, headers=api.student_headers())
        assert r.status_code == 409
        assert len(client.get("/communities/").json()) == 5


class TestCommentRoutes:

    def test_add_and_list(self, api, client):
        headers = api.student_headers()
        r = client.post("/comments/post/post1", json={"content": "Welcome!"}, headers=headers)
        assert r.status_code == 201
        comments = client.get("/comments/post/post1").json()
        assert [c["content"] for c in comments] == ["Welcome!"]
        assert comments[0]["userName"] == "Student"

    def test_missing_post(self, api, client):
        assert client.get("/comments/post/missing").status_code == 404
        r = client.post("/comments/post/missing", json={"content": "Hi"}, headers=api.student_headers())
        assert r.status_code == 404

    def test_flagged_post_comments_hidden_and_closed(self, api, client):
        student = api.student_headers()
        admin = api.admin_headers()
        client.post("/comments/post/post2", json={"content": "Congrats"}, headers=student)
        client.post("/posts/post2/flag", headers=student)
        assert client.get("/comments/post/post2").status_code == 404
        assert client.get("/comments/post/post2", headers=student).status_code == 404
        assert len(client.get("/comments/post/post2", headers=admin).json()) == 1
        r = client.post("/comments/post/post2", json={"content": "More"}, headers=student)
        assert r.status_code == 404
        r = client.post("/comments/post/post2", json={"content": "More"}, headers=admin)
        assert r.status_code == 422


class TestAdminRoutes:

    def test_requires_admin(self, api, client):
        assert client.get("/admin/posts", headers=api.student_headers()).status_code == 403

    def test_moderation_view(self, api, client):
        client.post("/posts/post3/flag", headers=api.student_headers())
        r = client.get("/admin/posts", headers=api.admin_headers())
        assert r.status_code == 200
        body = r.json()
        assert [p["id"] for p in body["flagged"]] == ["post3"]
        assert len(body["all"]) == 3
        r = client.get("/admin/posts", params={"search": "placement"}, headers=api.admin_headers())
        assert [p["id"] for p in r.json()["all"]] == ["post2"]
        assert r.json()["flagged"] == []
