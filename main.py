# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from routes import admin, ai, auth, courses, lessons, progress, quizzes, submissions, users

import config
from database import init_db

app = FastAPI(title="LMS API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(lessons.router)
app.include_router(quizzes.router)
app.include_router(submissions.router)
app.include_router(progress.router)
app.include_router(ai.router)
app.include_router(users.router)
app.include_router(admin.router)

@app.get("/api/health")
async def health():
    return {"status": "OK", "message": "Server is running"}

@app.on_event("startup")
async def startup_event():
    await init_db()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=config.HOST, port=config.PORT, reload=True)
