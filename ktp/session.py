"""
Session management for citizens (warga) and officers (petugas).

The actor is stored in Django's session; the browser only carries the
signed session cookie.
"""

import dataclasses
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from ktp.models import Penduduk, Petugas

logger = logging.getLogger(__name__)

KEY_USER_ID = "user_id"
KEY_USER_TYPE = "user_type"
KEY_USER_NAME = "user_name"
KEY_USER_ROLE = "user_role"
KEY_KELURAHAN_ID = "kelurahan_id"

USER_TYPE_WARGA = "warga"
USER_TYPE_PETUGAS = "petugas"

SESSION_AGE = 60 * 60 * 24  # 24 hours
SESSION_AGE_REMEMBER = SESSION_AGE * 30  # 30 days

ROLE_LABELS = dict(Petugas.ROLE_CHOICES)


@dataclass(frozen=True)
class Actor:
    """Authenticated user of the current request."""

    user_id: str
    user_type: str
    name: str
    role: str = ""
    kelurahan_id: Optional[int] = None

    @property
    def is_warga(self) -> bool:
        return self.user_type == USER_TYPE_WARGA

    @property
    def is_petugas(self) -> bool:
        return self.user_type == USER_TYPE_PETUGAS

    @property
    def is_kecamatan(self) -> bool:
        """District-level officers are not bound to a kelurahan."""
        return self.is_petugas and self.kelurahan_id is None

    @property
    def role_display(self) -> str:
        return ROLE_LABELS.get(self.role, self.role)

    @property
    def home_url(self) -> str:
        return "/admin" if self.is_petugas else "/dashboard"


def _start_session(request, values: dict, remember: bool):
    # New session key on login to prevent fixation
    request.session.cycle_key()
    request.session.update(values)
    request.session.set_expiry(SESSION_AGE_REMEMBER if remember else SESSION_AGE)


def set_warga_session(request, penduduk: Penduduk, remember: bool = False):
    _start_session(
        request,
        {
            KEY_USER_ID: penduduk.nik,
            KEY_USER_TYPE: USER_TYPE_WARGA,
            KEY_USER_NAME: penduduk.nama_lengkap,
            KEY_USER_ROLE: "",
            KEY_KELURAHAN_ID: None,
        },
        remember,
    )


def set_petugas_session(request, petugas: Petugas, remember: bool = False):
    _start_session(
        request,
        {
            KEY_USER_ID: str(petugas.id),
            KEY_USER_TYPE: USER_TYPE_PETUGAS,
            KEY_USER_NAME: petugas.nama_petugas,
            KEY_USER_ROLE: petugas.role,
            KEY_KELURAHAN_ID: petugas.kelurahan_id,
        },
        remember,
    )


def get_actor(request) -> Optional[Actor]:
    """Return the actor stored in the session, or None when not logged in."""
    session = getattr(request, "session", None)
    if session is None:
        return None

    user_id = session.get(KEY_USER_ID)
    user_type = session.get(KEY_USER_TYPE)
    if not user_id or user_type not in (USER_TYPE_WARGA, USER_TYPE_PETUGAS):
        return None

    return Actor(
        user_id=user_id,
        user_type=user_type,
        name=session.get(KEY_USER_NAME, ""),
        role=session.get(KEY_USER_ROLE, ""),
        kelurahan_id=session.get(KEY_KELURAHAN_ID),
    )


def refresh_petugas(request, actor: Actor) -> Optional[Actor]:
    """
    Re-read an officer's name, role and kelurahan from the database.

    Changes made in the admin site take effect on the next request instead
    of the next login. An officer whose account was removed is logged out.

    Returns:
        Actor: The refreshed actor, or None when the account no longer exists
    """
    petugas = None
    try:
        petugas_id = uuid.UUID(actor.user_id)
    except ValueError:
        pass
    else:
        petugas = (
            Petugas.objects.filter(pk=petugas_id)
            .only("nama_petugas", "role", "kelurahan_id")
            .first()
        )

    if petugas is None:
        logger.warning(f"Ending session of unknown petugas {actor.user_id}")
        clear_session(request)
        return None

    current = (petugas.nama_petugas, petugas.role, petugas.kelurahan_id)
    if current == (actor.name, actor.role, actor.kelurahan_id):
        return actor

    if petugas.kelurahan_id != actor.kelurahan_id:
        logger.info(
            f"Scope of petugas {actor.user_id} changed from kelurahan "
            f"{actor.kelurahan_id} to {petugas.kelurahan_id}"
        )
    request.session.update(
        {
            KEY_USER_NAME: petugas.nama_petugas,
            KEY_USER_ROLE: petugas.role,
            KEY_KELURAHAN_ID: petugas.kelurahan_id,
        }
    )
    return dataclasses.replace(
        actor, name=petugas.nama_petugas, role=petugas.role, kelurahan_id=petugas.kelurahan_id
    )


def clear_session(request):
    """Log out: drop session data and the cookie."""
    request.session.flush()
