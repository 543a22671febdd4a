import argparse
import io
import os
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from payload_masking.config_loader import get_engine, get_transformer
from payload_masking.core.engine import MaskingError
from payload_masking.core.transformer import ProblemCollector


def create_app(config_path: Optional[str] = None) -> FastAPI:
    """Create the FastAPI app using the shared MaskingEngine."""

    engine = get_engine(config_path)
    transformer = get_transformer(config_path)
    app = FastAPI(title="Payload Masking Service", version="1.0.0")

    class DocumentReq(BaseModel):
        document: str

    class ValueReq(BaseModel):
        field: str
        value: Optional[str] = None

    @app.get("/health")
    def health():
        return {"status": "ok", "masking_enabled": engine.enabled}

    @app.post("/mask/json")
    def mask_json(req: DocumentReq):
        try:
            return {"masked_document": engine.mask_document(req.document)}
        except MaskingError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.post("/mask/value")
    def mask_value(req: ValueReq):
        return {"masked_value": engine.mask_value(req.field, req.value)}

    async def mask_stream(body: bytes) -> bytes:
        """Run ``body`` through the stream transformer."""

        context = ProblemCollector()
        masked = await run_in_threadpool(transformer.transform, io.BytesIO(body), context)
        if masked is None:
            raise HTTPException(status_code=422, detail=context.problems)
        return masked.read()

    @app.post("/mask/stream")
    async def mask_stream_api(request: Request):
        body = await request.body()
        return Response(content=await mask_stream(body), media_type="application/json")

    # Expose internals for reuse/tests
    app.state.engine = engine
    app.state.transformer = transformer
    app.state.mask_stream = mask_stream

    return app


app = create_app()

# Export utilities for backwards compatibility
mask_stream = app.state.mask_stream


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the payload masking API")
    parser.add_argument(
        "--config",
        default=os.getenv("MASKING_CONFIG_PATH"),
        help="Path to masking configuration file",
    )
    parser.add_argument("--host", default=os.getenv("SERVICE_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("SERVICE_PORT", "8000")))
    parser.add_argument("--reload", action="store_true", default=bool(os.getenv("SERVICE_RELOAD")))
    args = parser.parse_args()

    app = create_app(args.config)
    import uvicorn

    uvicorn.run(app, host=args.host, port=args.port, reload=args.reload)
