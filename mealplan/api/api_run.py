from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse

from pathlib import Path
import logging

from mealplan.infra.json_store import RepositoryError
from mealplan.infra.paths import ALL_FILES, get_data_dir

# Routers
from mealplan.api.api_ai import router as ai_router
from mealplan.api.routes import fridge, health, ingredients, meals, plan, shopping

# Logging
logger = logging.getLogger("mealplan_app")

# Initialize FastAPI app
app = FastAPI(title="Meal Planner & Shopping List API")

# Include routers (recommendations before meals so /api/meals/{id} does not shadow them)
app.include_router(ai_router)
app.include_router(ingredients.router)
app.include_router(fridge.router)
app.include_router(meals.router)
app.include_router(plan.router)
app.include_router(shopping.router)
app.include_router(health.router)


@app.exception_handler(RepositoryError)
async def repository_error_handler(request: Request, exc: RepositoryError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/api/health")
def health_check(data_dir: Path = Depends(get_data_dir)):
    return {
        "status": "ok",
        "data_dir": str(data_dir),
        "files": {name: (data_dir / name).exists() for name in ALL_FILES},
    }
