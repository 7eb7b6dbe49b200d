from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from expr_backend.routers.expression_router import router as expression_router
from logger import setup_logging
from settings import settings

setup_logging(process_name="expr_backend")

app = FastAPI(
    title="Expression Autocomplete",
    description="Caret-aware completion for path expressions resolved against live data",
    version="0.1.0",
    openapi_tags=[
        {
            "name": "Expressions",
            "description": "Autocomplete, suggestion insertion and value preview for expressions",
        },
    ],
)

app.include_router(expression_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check():
    return JSONResponse(content={"status": "ok"}, status_code=200)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("expr_backend.main:app", host="0.0.0.0", port=8000)
