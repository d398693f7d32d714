"""
Система конфигурации для Transfer Client.

Все конфиги immutable (frozen dataclasses): один конфиг можно безопасно
разделять между несколькими TransferClient.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple, Union, Sequence, TYPE_CHECKING

from .url import join_base_url

if TYPE_CHECKING:
    from .logging import LoggingConfig

RESTRICTED_MODE_ENV = "TRANSFER_CLIENT_RESTRICTED_MODE"

_TRUTHY = {"1", "true", "yes", "on"}


def restricted_mode_from_env() -> bool:
    """
    Прочитать флаг restricted mode из окружения.

    Restricted mode - аналог safe_mode/open_basedir: запрещает включать
    следование редиректам по умолчанию.
    """
    return os.environ.get(RESTRICTED_MODE_ENV, "").strip().lower() in _TRUTHY


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DEFAULTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TransferDefaults:
    """
    Опции, которые execute() выставляет, если вызывающий код их не задал.

    Args:
        timeout: TIMEOUT (сек)
        return_transfer: RETURNTRANSFER - вернуть тело ответа, а не писать в stdout
        fail_on_error: FAILONERROR - статус >= 400 считается ошибкой
        follow_location: FOLLOWLOCATION (игнорируется в restricted mode)

    Examples:
        >>> TransferDefaults(timeout=10)
        >>> TransferDefaults(fail_on_error=False)
    """
    timeout: Union[int, float] = 30
    return_transfer: bool = True
    fail_on_error: bool = True
    follow_location: bool = True

    def __post_init__(self):
        """Валидация."""
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TransferClientConfig:
    """
    Главная конфигурация TransferClient.

    Args:
        base_url: База для endpoint'ов без схемы
        url_resolver: Функция ``(relative_path) -> absolute_url``; если задана,
            используется вместо base_url
        defaults: Значения опций по умолчанию
        restricted_mode: Не включать FOLLOWLOCATION по умолчанию
        user_agent: USERAGENT по умолчанию
        headers: Строки заголовков, добавляемые к каждому запросу
        logging: Конфигурация логирования (None = логи уходят в
            логгер ``transfer_client`` без собственных handlers)

    Examples:
        >>> config = TransferClientConfig(base_url="https://api.example.com")
        >>> config = TransferClientConfig.create(timeout=60, restricted_mode=True)
    """
    base_url: Optional[str] = None
    url_resolver: Optional[Callable[[str], str]] = None
    defaults: TransferDefaults = field(default_factory=TransferDefaults)
    restricted_mode: bool = field(default_factory=restricted_mode_from_env)
    user_agent: Optional[str] = None
    headers: Tuple[str, ...] = ()
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Нормализовать base_url и заморозить headers."""
        if not isinstance(self.headers, tuple):
            object.__setattr__(self, 'headers', tuple(self.headers))

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    def resolve(self, endpoint: str) -> str:
        """
        Превратить относительный endpoint в абсолютный URL.

        Example:
            >>> TransferClientConfig(base_url="https://api.example.com").resolve("/users")
            'https://api.example.com/users'
        """
        if self.url_resolver is not None:
            return self.url_resolver(endpoint)
        return join_base_url(self.base_url, endpoint)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: Union[int, float] = 30,
        fail_on_error: bool = True,
        follow_location: bool = True,
        restricted_mode: Optional[bool] = None,
        url_resolver: Optional[Callable[[str], str]] = None,
        user_agent: Optional[str] = None,
        headers: Optional[Sequence[str]] = None,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'TransferClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            timeout: TIMEOUT по умолчанию (сек)
            fail_on_error: FAILONERROR по умолчанию
            follow_location: FOLLOWLOCATION по умолчанию
            restricted_mode: None = взять из TRANSFER_CLIENT_RESTRICTED_MODE
            url_resolver: Функция разрешения относительных URL
            user_agent: USERAGENT по умолчанию
            headers: Строки заголовков для каждого запроса
            logging: Конфигурация логирования

        Examples:
            >>> config = TransferClientConfig.create(timeout=60)
            >>> config = TransferClientConfig.create(headers=["Accept: application/json"])
        """
        return cls(
            base_url=base_url,
            url_resolver=url_resolver,
            defaults=TransferDefaults(
                timeout=timeout,
                fail_on_error=fail_on_error,
                follow_location=follow_location,
            ),
            restricted_mode=restricted_mode_from_env() if restricted_mode is None else restricted_mode,
            user_agent=user_agent,
            headers=tuple(headers or ()),
            logging=logging,
        )

    def with_timeout(self, timeout: Union[int, float]) -> 'TransferClientConfig':
        """
        Новый конфиг с другим TIMEOUT по умолчанию.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return replace(self, defaults=replace(self.defaults, timeout=timeout))

    def with_headers(self, *lines: str) -> 'TransferClientConfig':
        """
        Новый конфиг с дополнительными строками заголовков.

        Example:
            >>> new_config = config.with_headers("X-API-Key: secret")
        """
        return replace(self, headers=self.headers + tuple(lines))

    def with_restricted_mode(self, enabled: bool = True) -> 'TransferClientConfig':
        """Новый конфиг с включённым/выключенным restricted mode."""
        return replace(self, restricted_mode=enabled)
