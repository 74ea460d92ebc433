from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from pydantic import ValidationError

from config.settings import get_settings
from greeter.core.identity import derive_client_id, redact_client_id
from greeter.core.policy import GreetingPolicy
from greeter.handler import GreetingError, GreetingHandler
from greeter.oracle import GreetingOracle, build_oracle
from greeter.schemas import GenerateRequest
from greeter.store import KeyValueStore, build_store


settings = get_settings()

logging.basicConfig(level=settings.log_level.upper(), format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("eid_greeter")

INTERNAL_ERROR = "An internal server error occurred."
INVALID_BODY = "Invalid request body"

app = FastAPI(title="Eid Greeting Assistant", version="1.0.0")

# CORS: allow local frontend during development
if settings.app_env.lower() in {"dev", "development", "local"}:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@lru_cache(maxsize=1)
def get_store() -> KeyValueStore:
    return build_store(get_settings())


@lru_cache(maxsize=1)
def get_oracle() -> Optional[GreetingOracle]:
    return build_oracle(get_settings())


@lru_cache(maxsize=1)
def get_policy() -> GreetingPolicy:
    policy = GreetingPolicy()
    logger.info(
        "Policy loaded: requests_per_window=%s window_seconds=%s block_seconds=%s blocked_keywords=%s",
        policy.requests_per_window,
        policy.window_seconds,
        policy.block_seconds,
        len(policy.blocked_keywords),
    )
    return policy


def get_handler(
    store: KeyValueStore = Depends(get_store),
    oracle: Optional[GreetingOracle] = Depends(get_oracle),
    policy: GreetingPolicy = Depends(get_policy),
) -> GreetingHandler:
    return GreetingHandler(store=store, oracle=oracle, policy=policy)


async def read_body(request: Request) -> bytes:
    # Parsed inside the route so quota and block checks come first
    return await request.body()


@app.exception_handler(Exception)
def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


@app.post("/api/generate")
def generate(
    request: Request,
    body: bytes = Depends(read_body),
    handler: GreetingHandler = Depends(get_handler),
) -> Any:
    client_id = derive_client_id(
        request.headers.get("x-forwarded-for"),
        request.headers.get("user-agent"),
    )

    try:
        logger.info(
            "Config: model=%s key_set=%s",
            settings.gemini_model,
            handler.oracle is not None,
        )
        request_count = handler.check_client(client_id)

        try:
            req = GenerateRequest.model_validate_json(body)
        except ValidationError as exc:
            logger.info("Rejected malformed request body: errors=%s", exc.error_count())
            raise GreetingError(400, INVALID_BODY) from exc

        logger.info(
            "Incoming greeting request: client=%s prompt_len=%s options=%s",
            redact_client_id(client_id),
            len(req.prompt or ""),
            req.options.model_dump(by_alias=True, mode="json") if req.options else None,
        )
        result = handler.generate(client_id, request_count, req.prompt, req.options)
        return result.to_body()
    except GreetingError as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    except Exception as e:
        logger.exception("Greeting generation failed: %s", e)
        # Full traceback stays in server logs; the caller only gets a fixed message
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}
