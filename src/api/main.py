import logging
import os

from fastapi import FastAPI

from api.routers import gamification, ops, preferences, schedule

# Logging configuration
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Study Planner")

app.include_router(ops.router)
app.include_router(preferences.router)
app.include_router(schedule.router)
app.include_router(gamification.router)

logger.info("Study Planner API ready")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
