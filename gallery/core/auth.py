import logging

from gallery.core.errors import DuplicateUser, InvalidCredentials
from gallery.core.storage import SESSION_KEY, USERS_KEY, JsonStorage
from gallery.models import ROLE_ADMIN, ROLE_ANONYMOUS, ROLE_USER, Session, User

LOG = logging.getLogger("gallery.auth")

# Plain-text credentials: this registry only gates UI controls on one device.
SEED_ADMIN = User(username="admin", password="admin", role=ROLE_ADMIN)


class AuthStore:
    def __init__(self, storage: JsonStorage):
        self._storage = storage
        self._users: tuple[User, ...] = self._load_users()
        self._session: Session | None = Session.from_dict(self._storage.load(SESSION_KEY, None))

    def _load_users(self) -> tuple[User, ...]:
        raw = self._storage.load(USERS_KEY, None)
        if raw is not None:
            try:
                if not isinstance(raw, list):
                    raise TypeError(f"expected a list, got {type(raw).__name__}")
                users = tuple(User.from_dict(r) for r in raw)
                names = [u.username for u in users]
                if len(set(names)) != len(names):
                    raise ValueError("duplicate usernames in registry")
                return users
            except (KeyError, TypeError, ValueError) as e:
                LOG.warning("Stored users are malformed, reseeding admin: %s", e)
        users = (SEED_ADMIN,)
        self._save_users(users)
        return users

    def _save_users(self, users: tuple[User, ...]) -> None:
        self._storage.save(USERS_KEY, [u.to_dict() for u in users])

    def _find(self, username: str) -> User | None:
        for user in self._users:
            if user.username == username:
                return user
        return None

    @property
    def session(self) -> Session | None:
        return self._session

    def users(self) -> list[User]:
        return list(self._users)

    def register(self, username: str, password: str) -> User:
        if not username:
            raise InvalidCredentials(username)
        if self._find(username) is not None:
            raise DuplicateUser(username)
        user = User(username=username, password=password, role=ROLE_USER)
        self._users = (*self._users, user)
        self._save_users(self._users)
        LOG.info("Registered user %s", username)
        return user

    def login(self, username: str, password: str) -> User:
        user = self._find(username)
        if user is None or user.password != password:
            LOG.info("Rejected login for %s", username)
            raise InvalidCredentials(username)
        self._session = Session(username=user.username)
        self._storage.save(SESSION_KEY, self._session.to_dict())
        return user

    def logout(self) -> None:
        self._session = None
        self._storage.save(SESSION_KEY, None)

    def current_user(self) -> User | None:
        if self._session is None:
            return None
        return self._find(self._session.username)

    def current_role(self) -> str:
        user = self.current_user()
        return user.role if user else ROLE_ANONYMOUS

    def is_admin(self) -> bool:
        return self.current_role() == ROLE_ADMIN
