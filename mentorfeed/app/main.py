# app/main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from mentorfeed.app.core.config import settings
from mentorfeed.app.core.errors import FeedbackAppError
from mentorfeed.db.session import engine
from mentorfeed.db import Base
from mentorfeed.app.routers import admin, assignments, auth, events, forms, reports, submissions, users

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(admin.router)
app.include_router(forms.router)
app.include_router(events.router)
app.include_router(assignments.router)
app.include_router(submissions.router)
app.include_router(reports.router)


@app.exception_handler(FeedbackAppError)
async def feedback_app_error_handler(request: Request, exc: FeedbackAppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.on_event("startup")
async def on_startup():
    Base.metadata.create_all(bind=engine)


@app.get("/health")
def health():
    return {"status": "ok"}
