from fastapi import Response


def set_cache_headers(
    response: Response,
    public: bool = True,
    max_age: int = 60,
    stale_while_revalidate: int = 30,
    must_revalidate: bool = False,
) -> Response:
    directives = [
        "public" if public else "private",
        f"max-age={max_age}",
        f"stale-while-revalidate={stale_while_revalidate}",
    ]
    if must_revalidate:
        directives.append("must-revalidate")
    response.headers["Cache-Control"] = ", ".join(directives)
    return response
