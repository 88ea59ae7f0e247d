from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hradmin.api.v1.employees.router import router as employees_router
from hradmin.api.v1.offsets.router import router as offsets_router
from hradmin.api.v1.slvl.router import router as slvl_router
from hradmin.api.v1.time_schedules.router import router as time_schedules_router
from hradmin.core.logging_config import configure_logging


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="HR Admin Backend")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(employees_router)
    app.include_router(offsets_router)
    app.include_router(slvl_router)
    app.include_router(time_schedules_router)

    return app


app = create_app()
