import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import CORS_ORIGINS, DB_NAME, LOG_LEVEL, LOGIN_DELAY_SECONDS, PORT, STORAGE_QUOTA_BYTES
from storage import KeyValueStore
from services.session import SessionService
from services.content import ContentService
from routes.auth import router as auth_router
from routes.browse import router as browse_router
from routes.posts import router as posts_router
from routes.comments import router as comments_router
from routes.communities import router as communities_router
from routes.admin import router as admin_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

def create_app(
    db_name: str = DB_NAME,
    login_delay: float = LOGIN_DELAY_SECONDS,
    quota_bytes: int = STORAGE_QUOTA_BYTES,
) -> FastAPI:
    app = FastAPI(title="Campus Connect Hub")

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],  # Allows all methods
        allow_headers=["*"],  # Allows all headers
    )

    # Initialize storage and services
    store = KeyValueStore(db_name, quota_bytes=quota_bytes)
    app.state.store = store
    app.state.session_service = SessionService(store, login_delay=login_delay)
    app.state.content_service = ContentService(store)

    # Include routers
    app.include_router(auth_router)
    app.include_router(browse_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(communities_router)
    app.include_router(admin_router)
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=PORT, reload=True)
