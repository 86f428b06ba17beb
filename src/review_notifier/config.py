"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
import logging

from .notifier import DEFAULT_MESSAGE_TEMPLATE, validate_template


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    owner: str = ""
    repository: str = ""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30
    per_page: int = 100


@dataclass
class SlackConfig:
    """Slack API 설정"""
    token: Optional[str] = None
    users_base64: Optional[str] = None
    api_base_url: str = "https://slack.com/api"
    timeout_seconds: int = 30


@dataclass
class NotifierConfig:
    """알림 설정"""
    message_template: str = DEFAULT_MESSAGE_TEMPLATE
    reconcile_reviews: bool = False


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig
    slack: SlackConfig
    notifier: NotifierConfig = field(default_factory=NotifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                owner=os.getenv("GITHUB_OWNER", ""),
                repository=os.getenv("GITHUB_REPOSITORY", ""),
                token=os.getenv("GITHUB_TOKEN") or None,
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
                per_page=int(os.getenv("GITHUB_PER_PAGE", "100")),
            ),
            slack=SlackConfig(
                token=os.getenv("SLACK_TOKEN") or None,
                users_base64=os.getenv("SLACK_USERS") or None,
                api_base_url=os.getenv("SLACK_API_URL", "https://slack.com/api"),
                timeout_seconds=int(os.getenv("SLACK_TIMEOUT", "30")),
            ),
            notifier=NotifierConfig(
                message_template=os.getenv("NOTIFIER_MESSAGE_TEMPLATE", DEFAULT_MESSAGE_TEMPLATE),
                reconcile_reviews=_env_bool("NOTIFIER_RECONCILE_REVIEWS"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """
        YAML 파일에서 설정 로드

        Credentials missing from the file fall back to GITHUB_TOKEN,
        SLACK_TOKEN and SLACK_USERS.
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}
        if not isinstance(config_data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        config = cls(
            github=GitHubConfig(**config_data.get('github', {})),
            slack=SlackConfig(**config_data.get('slack', {})),
            notifier=NotifierConfig(**config_data.get('notifier', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
        )

        # 토큰은 파일보다 환경 변수 사용 권장
        config.github.token = config.github.token or os.getenv("GITHUB_TOKEN") or None
        config.slack.token = config.slack.token or os.getenv("SLACK_TOKEN") or None
        config.slack.users_base64 = config.slack.users_base64 or os.getenv("SLACK_USERS") or None
        return config

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "AppConfig":
        """Load from YAML when the file exists, from the environment otherwise."""
        if config_path and Path(config_path).exists():
            return cls.from_yaml(config_path)
        return cls.from_env()

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        if not self.github.owner:
            errors.append("GitHub owner is required")
        if not self.github.repository:
            errors.append("GitHub repository is required")
        if not 1 <= self.github.per_page <= 100:
            errors.append("GitHub per_page must be between 1 and 100")
        if self.github.timeout_seconds <= 0 or self.slack.timeout_seconds <= 0:
            errors.append("Timeouts must be positive")

        # Slack 토큰과 사용자 매핑 필수 확인
        if not self.slack.token:
            errors.append("Slack token is required")
        if not self.slack.users_base64:
            errors.append("Slack users mapping is required")

        try:
            validate_template(self.notifier.message_template)
        except ValueError as e:
            errors.append(str(e))

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'owner': self.github.owner,
                'repository': self.github.repository,
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                'per_page': self.github.per_page,
                # 보안상 토큰은 제외
            },
            'slack': {
                'api_base_url': self.slack.api_base_url,
                'timeout_seconds': self.slack.timeout_seconds,
            },
            'notifier': {
                'message_template': self.notifier.message_template,
                'reconcile_reviews': self.notifier.reconcile_reviews,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
        }


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config

    def _setup_logging(self) -> None:
        """로깅 설정"""
        logging.basicConfig(
            level=getattr(logging, self._config.logging.level.upper()),
            format=self._config.logging.format,
        )

        # 파일 로깅이 설정된 경우 로테이션 설정
        if self._config.logging.file_path:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))

            # 루트 로거에 핸들러 추가
            root_logger = logging.getLogger()
            root_logger.addHandler(handler)
