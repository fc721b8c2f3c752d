"""
Pipeline hooks and debug tracing example.

Demonstrates:
- Cross-field checks in with_validator()
- Observing pipeline stages with AfterStage
- Recording a PipelineTrace in debug mode
"""

import logging

from fastapi import Depends, FastAPI, Request

from fastapi_form_request import (
    AfterStage,
    FormRequest,
    MinLength,
    PipelineContext,
    Required,
    RuleSet,
    Stage,
    ValidationPipeline,
    form_request,
)

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger("examples.hooks")

app = FastAPI(title="Hooks and Debug Example")


class ChangePassword(FormRequest):
    """Body of POST /password."""

    password: str = ""
    password_confirmation: str = ""

    def rules(self) -> RuleSet:
        return {"password": [Required(), MinLength(8)]}

    def with_validator(self) -> None:
        if self.password != self.password_confirmation:
            raise ValueError("Password confirmation does not match")


async def log_stage(
    ctx: PipelineContext, stage: Stage, error: Exception | None
) -> None:
    logger.info("stage=%s ok=%s", stage.value, error is None)


pipeline = ValidationPipeline(debug=True).add_hook(AfterStage(log_stage))


@app.post("/password")
async def change_password(
    request: Request,
    body: ChangePassword = Depends(form_request(ChangePassword, pipeline=pipeline)),
):
    """Change password; the debug trace is exposed for illustration."""
    trace = request.state.form_request_trace
    return {
        "changed": True,
        "stages": [entry.stage.value for entry in trace.entries],
        "total_ms": round(trace.total_duration_ms, 3),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -X POST http://localhost:8000/password \
    #      -d '{"password": "s3cretpass", "password_confirmation": "s3cretpass"}'
    # curl -X POST http://localhost:8000/password \
    #      -d '{"password": "s3cretpass", "password_confirmation": "other"}'
