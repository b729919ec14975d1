from swapmatch.db.database import get_session, init_db, session_scope
from swapmatch.db.operations import (
    add_card,
    album_to_model,
    card_to_model,
    create_album,
    create_match,
    create_user,
    delete_user_card,
    get_album,
    get_album_by_name,
    get_album_card_ids,
    get_card,
    get_match,
    get_matches_for_user,
    get_user,
    get_user_by_nickname,
    get_user_card,
    get_user_cards,
    list_album_cards,
    list_albums,
    list_users_except,
    match_to_model,
    update_match_status,
    upsert_user_card,
    user_card_to_record,
    user_to_ref,
)

__all__ = [
    "add_card",
    "album_to_model",
    "card_to_model",
    "create_album",
    "create_match",
    "create_user",
    "delete_user_card",
    "get_album",
    "get_album_by_name",
    "get_album_card_ids",
    "get_card",
    "get_match",
    "get_matches_for_user",
    "get_session",
    "get_user",
    "get_user_by_nickname",
    "get_user_card",
    "get_user_cards",
    "init_db",
    "list_album_cards",
    "list_albums",
    "list_users_except",
    "match_to_model",
    "session_scope",
    "update_match_status",
    "upsert_user_card",
    "user_card_to_record",
    "user_to_ref",
]
