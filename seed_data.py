"""Content written to storage the first time the service starts."""
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from schemas.communities import Community
from schemas.posts import Post

DEFAULT_COMMUNITIES = [
    {
        "name": "Placements",
        "description": "Discussions about campus placements, interviews, and job opportunities",
        "member_count": 120,
    },
    {
        "name": "Academics",
        "description": "Course discussions, study material, and academic guidance",
        "member_count": 150,
    },
    {
        "name": "Events",
        "description": "College events, workshops, seminars, and extracurricular activities",
        "member_count": 85,
    },
    {
        "name": "General",
        "description": "General discussions about campus life and other topics",
        "member_count": 200,
    },
    {
        "name": "Announcements",
        "description": "Important announcements from college administration",
        "member_count": 250,
    },
]

def default_communities(now: Optional[datetime] = None) -> List[Community]:
    now = now or datetime.now(timezone.utc)
    return [
        Community(
            id=f"community_{seed['name'].lower()}",
            name=seed["name"],
            description=seed["description"],
            created_by="admin",
            created_at=now,
            member_count=seed["member_count"],
        )
        for seed in DEFAULT_COMMUNITIES
    ]

def initial_posts(now: Optional[datetime] = None) -> List[Post]:
    now = now or datetime.now(timezone.utc)
    return [
        Post(
            id="post1",
            title="Welcome to IGDTUW Connect Hub!",
            content="This is a community platform for IGDTUW students to connect, share information, and help each other.",
            tags=["announcements"],
            timestamp=now,
            upvotes=15,
            user_id="admin",
            user_name="Admin",
        ),
        Post(
            id="post2",
            title="Upcoming Placement Drive",
            content="Google is visiting campus next week. Prepare your resumes and algorithms!",
            tags=["placements"],
            timestamp=now - timedelta(days=1),
            upvotes=25,
            user_id="user123",
            user_name="placement_coordinator",
        ),
        Post(
            id="post3",
            title="How difficult is the Data Structures course?",
            content="I'm finding the assignments challenging. Any tips from seniors?",
            tags=["academics"],
            timestamp=now - timedelta(days=2),
            upvotes=5,
            user_id="anonymous",
            user_name=None,
            is_anonymous=True,
        ),
    ]
