from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import json

from src.shortener.core.config import Settings, settings as default_settings, get_redis, logger
from src.shortener.core.exceptions import ForbiddenError, NotFoundError
from src.shortener.core.shortcode import ShortCodeGenerator
from src.shortener.core.validators import normalize_url
from src.shortener.db.base import utcnow
from src.shortener.models.click import Click
from src.shortener.models.url import ShortURL
from src.shortener.schemas.url import URLRead

USER_AGENT_MAX_LENGTH = 512


def build_short_url(base_url: str, short_code: str) -> str:
    return f"{base_url.rstrip('/')}/{short_code}"


class URLService:
    """
    Shortened URL operations.

    Dependencies are passed in by the caller:
    - db: SQLAlchemy session, the source of truth
    - cache: Redis-like client (get/setex/delete) for short code lookups
    - settings: base URL and short code parameters
    """

    def __init__(self, db: Session, cache=None, settings: Settings = default_settings):
        self.db = db
        self.cache = cache if cache is not None else get_redis()
        self.settings = settings
        self.generator = ShortCodeGenerator(
            length=settings.SHORT_CODE_LENGTH,
            max_attempts=settings.SHORT_CODE_MAX_ATTEMPTS,
        )

    def to_view(self, url: ShortURL) -> URLRead:
        return URLRead(
            id=url.id,
            original_url=url.original_url,
            short_url=build_short_url(self.settings.BASE_URL, url.short_code),
            short_code=url.short_code,
            click_count=url.click_count,
            created_at=url.created_at,
            updated_at=url.updated_at,
        )

    def _active(self):
        return self.db.query(ShortURL).filter(ShortURL.deleted_at.is_(None))

    def code_exists(self, short_code: str) -> bool:
        """Check a code against active rows only. Retired codes may be reissued."""
        return self._active().filter(ShortURL.short_code == short_code).first() is not None

    def _cache_key(self, short_code: str) -> str:
        return f"url:{short_code}"

    def _cache_set(self, url: ShortURL) -> None:
        try:
            self.cache.setex(
                self._cache_key(url.short_code),
                self.settings.CACHE_TTL_SECONDS,
                json.dumps({"id": url.id, "original_url": url.original_url}),
            )
        except Exception as e:
            logger.error(f"Redis error: {e}")

    def _cache_get(self, short_code: str) -> Optional[dict]:
        try:
            cached = self.cache.get(self._cache_key(short_code))
            if cached:
                return json.loads(cached)
        except Exception as e:
            logger.error(f"Redis error: {e}")
        return None

    def _cache_delete(self, short_code: str) -> None:
        try:
            self.cache.delete(self._cache_key(short_code))
        except Exception as e:
            logger.error(f"Redis error: {e}")

    def create_short_url(self, original_url: str, owner_id: Optional[str] = None) -> URLRead:
        """
        Create a new shortened URL.

        Args:
            original_url: URL to shorten, stored in normalized form
            owner_id: ID of the creating user, or None for anonymous

        Returns:
            View of the created URL

        Raises:
            InvalidUrlError: If the URL is not a valid http/https URL
            CodeGenerationExhaustedError: If no free code could be found
        """
        normalized = normalize_url(original_url)

        attempts = self.settings.SHORT_CODE_MAX_ATTEMPTS
        for attempt in range(1, attempts + 1):
            short_code = self.generator.allocate(self.code_exists)
            db_url = ShortURL(original_url=normalized, short_code=short_code, user_id=owner_id)
            self.db.add(db_url)
            try:
                self.db.commit()
            except IntegrityError:
                # Another request took the same code between check and insert
                self.db.rollback()
                if attempt == attempts:
                    raise
                logger.warning(f"Short code race on {short_code}, retrying")
                continue
            break

        self.db.refresh(db_url)
        self._cache_set(db_url)
        logger.info(f"Short URL created: {db_url.short_code} (owner={owner_id or 'anonymous'})")
        return self.to_view(db_url)

    def get_active_by_code(self, short_code: str) -> Optional[ShortURL]:
        return self._active().filter(ShortURL.short_code == short_code).first()

    def resolve_and_record_click(
        self,
        short_code: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> str:
        """
        Resolve a short code and record one click against it.

        Args:
            short_code: Code to resolve
            ip_address: Client address, if known
            user_agent: Client User-Agent header, if any

        Returns:
            The stored original URL

        Raises:
            NotFoundError: If no active URL has this code. No click is
                recorded in that case.
        """
        target = self._cache_get(short_code)
        if target is None:
            db_url = self.get_active_by_code(short_code)
            if db_url is None:
                raise NotFoundError("Short URL not found")
            target = {"id": db_url.id, "original_url": db_url.original_url}
            self._cache_set(db_url)

        # Single UPDATE so concurrent clicks cannot lose increments
        updated = (
            self.db.query(ShortURL)
            .filter(ShortURL.id == target["id"], ShortURL.deleted_at.is_(None))
            .update({ShortURL.click_count: ShortURL.click_count + 1}, synchronize_session=False)
        )
        if not updated:
            self.db.rollback()
            self._cache_delete(short_code)
            raise NotFoundError("Short URL not found")

        if user_agent:
            user_agent = user_agent[:USER_AGENT_MAX_LENGTH]
        self.db.add(Click(url_id=target["id"], ip_address=ip_address, user_agent=user_agent))
        self.db.commit()

        return target["original_url"]

    def list_for_owner(self, owner_id: str) -> List[URLRead]:
        """Active URLs owned by the user, newest first."""
        urls = (
            self._active()
            .filter(ShortURL.user_id == owner_id)
            .order_by(ShortURL.created_at.desc())
            .all()
        )
        return [self.to_view(url) for url in urls]

    def _get_owned(self, url_id: str, requester_id: str) -> ShortURL:
        db_url = self._active().filter(ShortURL.id == url_id).first()
        if db_url is None:
            raise NotFoundError("URL not found")
        if db_url.user_id is None or db_url.user_id != requester_id:
            raise ForbiddenError("You do not have permission to modify this URL")
        return db_url

    def update(self, url_id: str, new_original_url: str, requester_id: str) -> URLRead:
        """
        Change the destination of an owned URL.

        Raises:
            NotFoundError: If the URL does not exist or was deleted
            ForbiddenError: If the requester does not own the URL
            InvalidUrlError: If the new URL is not a valid http/https URL
        """
        db_url = self._get_owned(url_id, requester_id)
        normalized = normalize_url(new_original_url)

        db_url.original_url = normalized
        self.db.commit()
        self.db.refresh(db_url)

        self._cache_delete(db_url.short_code)
        return self.to_view(db_url)

    def soft_delete(self, url_id: str, requester_id: str) -> dict:
        """
        Retire an owned URL. The row is kept with ``deleted_at`` set.

        Raises:
            NotFoundError: If the URL does not exist or was already deleted
            ForbiddenError: If the requester does not own the URL
        """
        db_url = self._get_owned(url_id, requester_id)
        db_url.deleted_at = utcnow()
        self.db.commit()

        self._cache_delete(db_url.short_code)
        logger.info(f"Short URL deleted: {db_url.short_code}")
        return {"message": "URL deleted successfully"}
