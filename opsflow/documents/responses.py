from fastapi import Response


def pdf_response(content: bytes, filename: str) -> Response:
    """Réponse ``application/pdf`` affichée dans le navigateur."""
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
