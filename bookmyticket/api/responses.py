from fastapi import Response

from bookmyticket.core.config import settings


def pdf_attachment(content: bytes) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{settings.EXPORT_FILENAME}"'},
    )
