"""
Administrative scoping of officer queries.

District-level officers (no kelurahan) see everything; kelurahan officers
only see their own sub-district. The returned Q objects are applied inside
the query so out-of-scope rows are never counted or loaded.
"""

from django.db.models import Q


def permohonan_scope(actor, prefix: str = "") -> Q:
    if actor.kelurahan_id is None:
        return Q()
    return Q(**{f"{prefix}jadwal_sesi__lokasi_kelurahan_id": actor.kelurahan_id})


def jadwal_scope(actor) -> Q:
    if actor.kelurahan_id is None:
        return Q()
    return Q(lokasi_kelurahan_id=actor.kelurahan_id)


def penduduk_scope(actor) -> Q:
    if actor.kelurahan_id is None:
        return Q()
    return Q(kelurahan_id=actor.kelurahan_id)
