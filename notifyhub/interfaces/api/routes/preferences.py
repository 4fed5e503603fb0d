"""Routes for per-user contact preferences."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from notifyhub.application.use_cases.preferences import (
    can_receive as can_receive_uc,
    get_or_create_preferences as get_or_create_preferences_uc,
    opt_in_out as opt_in_out_uc,
    preferred_channel as preferred_channel_uc,
    update_preferences as update_preferences_uc,
    verify_channel as verify_channel_uc,
)
from notifyhub.domain.entities import Preference
from notifyhub.domain.exceptions import NotificationServiceError
from notifyhub.interfaces.api.dependencies import get_db
from notifyhub.interfaces.api.routes_helpers import entity_payload, to_http_exception
from notifyhub.interfaces.api.schemas import (
    CanReceiveRead,
    OptRequest,
    PreferenceRead,
    PreferenceUpdate,
    PreferredChannelRead,
    VerifyRequest,
)

router = APIRouter(prefix="/preferences", tags=["preferences"])


def _preference_to_read_model(preference: Preference) -> PreferenceRead:
    return PreferenceRead.model_validate(entity_payload(preference))


@router.get("/{user_id}", response_model=PreferenceRead)
def get_preferences(user_id: str, db: Session = Depends(get_db)) -> PreferenceRead:
    try:
        preference = get_or_create_preferences_uc(db, user_id)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _preference_to_read_model(preference)


@router.put("/{user_id}", response_model=PreferenceRead)
def update_preferences(
    user_id: str,
    payload: PreferenceUpdate,
    db: Session = Depends(get_db),
) -> PreferenceRead:
    channels = None
    if payload.channels is not None:
        channels = {
            name: changes.model_dump(exclude_unset=True)
            for name, changes in payload.channels.items()
        }
    preferences = (
        payload.preferences.model_dump(exclude_unset=True)
        if payload.preferences is not None
        else None
    )
    try:
        preference = update_preferences_uc(
            db, user_id, channels=channels, preferences=preferences
        )
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _preference_to_read_model(preference)


@router.post("/{user_id}/opt", response_model=PreferenceRead)
def opt_in_out(user_id: str, payload: OptRequest, db: Session = Depends(get_db)) -> PreferenceRead:
    try:
        preference = opt_in_out_uc(db, user_id, payload.channel, payload.action, payload.value)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _preference_to_read_model(preference)


@router.post("/{user_id}/verify", response_model=PreferenceRead)
def verify_channel(
    user_id: str, payload: VerifyRequest, db: Session = Depends(get_db)
) -> PreferenceRead:
    try:
        preference = verify_channel_uc(db, user_id, payload.channel)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _preference_to_read_model(preference)


@router.get("/{user_id}/preferred-channel", response_model=PreferredChannelRead | None)
def preferred_channel(user_id: str, db: Session = Depends(get_db)) -> PreferredChannelRead | None:
    try:
        preferred = preferred_channel_uc(db, user_id)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    if preferred is None:
        return None
    return PreferredChannelRead(channel=preferred.channel, value=preferred.value)


@router.get("/{user_id}/can-receive", response_model=CanReceiveRead)
def can_receive(
    user_id: str,
    category: str = Query(...),
    db: Session = Depends(get_db),
) -> CanReceiveRead:
    try:
        allowed = can_receive_uc(db, user_id, category)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return CanReceiveRead(user_id=user_id, category=category, allowed=allowed)
