# newsletter/routes/health.py
from fastapi import APIRouter, Response, status

router = APIRouter(tags=["health"])


@router.get("/health_check")
async def health_check():
    return Response(status_code=status.HTTP_200_OK)
