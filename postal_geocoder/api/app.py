from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from postal_geocoder.core.config import DEFAULT_MAX_RESULTS
from postal_geocoder.core.errors import InvalidQueryPointError, NotInitializedError
from postal_geocoder.core.geocoder import ReversePostalGeocoder
from postal_geocoder.utils.logging import log_error, log_structured


class BatchLookupRequest(BaseModel):
    points: List[Dict[str, Any]]
    max_results: int = Field(DEFAULT_MAX_RESULTS, ge=1)


def create_app(geocoder: Optional[ReversePostalGeocoder] = None, init_on_startup: bool = True) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        geocoder: Geocoder to serve (a new one is created when omitted)
        init_on_startup: Build the index before the app starts serving
    """
    geocoder = geocoder or ReversePostalGeocoder()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_on_startup and not geocoder.is_ready():
            log_structured("info", "Loading geocoding data")
            geocoder.init()
        yield

    app = FastAPI(
        title="Reverse Postal Code Geocoder",
        description="Nearest GeoNames postal codes for a latitude/longitude",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.geocoder = geocoder

    @app.get("/health")
    def health():
        index = geocoder.index
        return {
            "ready": geocoder.is_ready(),
            "records": len(index) if index is not None else 0
        }

    @app.get("/geocode")
    def geocode(
        latitude: Optional[str] = None,
        longitude: Optional[str] = None,
        max_results: Optional[str] = None
    ):
        if not latitude or not longitude:
            raise HTTPException(status_code=400, detail="Bad Request")
        try:
            limit = int(max_results) if max_results is not None else DEFAULT_MAX_RESULTS
        except ValueError:
            raise HTTPException(status_code=400, detail=f"max_results must be an integer, got {max_results!r}")
        try:
            results = geocoder.look_up({"latitude": latitude, "longitude": longitude}, limit)
        except NotInitializedError as e:
            raise HTTPException(status_code=503, detail=str(e))
        except ValueError as e:
            # InvalidQueryPointError and bad max_results
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            log_error(e, {"module": "api", "function": "geocode"})
            raise HTTPException(status_code=500, detail=str(e))
        return [result.to_dict() for result in results or []]

    @app.post("/geocode")
    def geocode_batch(request: BatchLookupRequest):
        try:
            outcomes = geocoder.look_up(request.points, request.max_results)
        except NotInitializedError as e:
            raise HTTPException(status_code=503, detail=str(e))
        except Exception as e:
            log_error(e, {"module": "api", "function": "geocode_batch"})
            raise HTTPException(status_code=500, detail=str(e))

        response = []
        for outcome in outcomes:
            if isinstance(outcome, InvalidQueryPointError):
                response.append({"error": str(outcome)})
            else:
                response.append({"results": [result.to_dict() for result in outcome]})
        return response

    return app


app = create_app()
