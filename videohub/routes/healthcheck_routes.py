from fastapi import APIRouter, status

from videohub.core.responses import ApiResponse

router = APIRouter(tags=['healthcheck'])


@router.get('')
def healthcheck():
    return ApiResponse(status.HTTP_200_OK, {'status': 'VideoHub API Running'}, 'OK').to_response()
