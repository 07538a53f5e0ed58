from fastapi import Response


def set_content_range(response: Response, resource: str, offset: int, count: int, total: int) -> None:
    """Ajoute le header ``Content-Range: <resource> <début>-<fin>/<total>`` (format react-admin)."""
    end_range = offset + count - 1 if count else offset
    response.headers["Content-Range"] = f"{resource} {offset}-{end_range}/{total}"
