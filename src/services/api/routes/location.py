# src/services/api/routes/location.py
"""
Приём геолокации от водителей и live-tracking для пассажиров.

WebSocket /location/stream:
- ID рейса передаётся параметром ?rideId=... или первым сообщением {"rideId": "..."}
- сервер присылает {rideId, latitude, longitude, speed?, heading?, timestamp}
  не чаще раза за интервал опроса
- сервер закрывает соединение, когда рейс завершён или произошла ошибка
"""

import asyncio
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from src.common.logger import log_debug
from src.core.tracking import LocationBatchIn, LocationIngestor, LocationStreamMessage, StreamHandshake
from src.core.users import AuthUser
from src.services.api.dependencies import Container, get_container, get_ingestor
from src.services.api.security import get_current_user

router = APIRouter(prefix="/location", tags=["Location"])


@router.post("/update", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_location(
    request: LocationBatchIn,
    caller: AuthUser = Depends(get_current_user),
    ingestor: LocationIngestor = Depends(get_ingestor),
):
    await ingestor.ingest(caller, request.updates)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def _read_ride_id(websocket: WebSocket, ride_id_param: Optional[str]) -> UUID:
    """ID рейса из query-параметра или из первого сообщения."""
    if ride_id_param:
        return UUID(ride_id_param)
    data = await websocket.receive_json()
    return StreamHandshake.model_validate(data).ride_id


async def _wait_disconnect(websocket: WebSocket) -> None:
    """Ждёт отключения клиента; входящие сообщения игнорируются."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


async def _close(websocket: WebSocket, code: int = status.WS_1000_NORMAL_CLOSURE) -> None:
    if websocket.client_state != WebSocketState.CONNECTED:
        return
    try:
        await websocket.close(code=code)
    except RuntimeError:
        # Клиент ушёл раньше, чем сервер успел закрыть соединение
        pass


@router.websocket("/stream")
async def location_stream(
    websocket: WebSocket,
    ride_id: Optional[str] = Query(None, alias="rideId"),
    container: Container = Depends(get_container),
) -> None:
    await websocket.accept()

    try:
        ride_uuid = await asyncio.wait_for(
            _read_ride_id(websocket, ride_id),
            timeout=container.settings.tracking.HANDSHAKE_TIMEOUT_SECONDS,
        )
    except WebSocketDisconnect:
        return
    except asyncio.TimeoutError:
        await log_debug("Клиент live-tracking не прислал ID рейса вовремя")
        await _close(websocket, status.WS_1008_POLICY_VIOLATION)
        return
    except (ValueError, KeyError, ValidationError) as e:
        # KeyError: бинарный кадр вместо текстового JSON
        await log_debug(f"Некорректный handshake live-tracking: {e!r}")
        await _close(websocket, status.WS_1008_POLICY_VIOLATION)
        return

    async def send(message: LocationStreamMessage) -> None:
        await websocket.send_json(message.to_wire())

    try:
        await container.sessions.run_session(ride_uuid, send, lambda: _wait_disconnect(websocket))
    except asyncio.CancelledError:
        # Остановка сервера или отмена со стороны ASGI; сессия уже снята с учёта
        return
    await _close(websocket)
