# Cache module
from stylist_service.cache.session_store import (
    SessionStore,
    InMemorySessionStore,
    DiskSessionStore,
    create_session_store,
)
