"""
Basic usage example of fastapi-form-request.

Demonstrates:
- Declaring a FormRequest with rules and a preparation hook
- Using form_request() as a FastAPI dependency
- Reading typed query parameters from the validated request
"""

from fastapi import Depends, FastAPI

from fastapi_form_request import (
    FormRequest,
    MaxLength,
    OneOf,
    Required,
    RuleSet,
    enrich_openapi,
    form_request,
)

app = FastAPI(title="Basic Form Request Example")


class CreatePost(FormRequest):
    """Body of POST /posts."""

    title: str = ""
    content: str = ""
    status: str = "draft"

    def rules(self) -> RuleSet:
        return {
            "title": [Required(), MaxLength(120)],
            "content": Required(),
            "status": OneOf(["draft", "published"]),
        }

    def prepare_for_validation(self) -> None:
        self.title = self.title.strip()
        self.status = self.status.lower()


@app.post("/posts")
async def create_post(post: CreatePost = Depends(form_request(CreatePost))):
    """Create a post; ?notify=true&priority=2 arrive typed in post.query."""
    return {
        "title": post.title,
        "status": post.status,
        "notify": post.query.get("notify", False),
        "priority": post.query.get("priority", 0),
    }


# Document the request body that the dependency reads itself
enrich_openapi(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -X POST 'http://localhost:8000/posts?notify=true&priority=2' \
    #      -d '{"title": " Hello ", "content": "World", "status": "PUBLISHED"}'
    # curl -X POST http://localhost:8000/posts -d '{"title": ""}'
