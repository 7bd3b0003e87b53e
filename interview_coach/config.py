"""
Interview Coach Configuration System
====================================

This file contains ALL configuration for the interview session engine.
- User settings at the top (things users might want to change)
- Internal constants at the bottom (technical defaults)
"""
import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse


# =============================================================================
# USER SETTINGS - Edit these to customize the interview session
# =============================================================================

# External AI evaluation/question service
AI_SERVICE_URL = "http://localhost:8001"
TELEMETRY_WS_URL = "ws://localhost:8001"

# Interview settings
DEFAULT_JOB_ROLE = "Software Developer"
WORKDIR = "./_interviews"

# Speech settings
ENABLE_TTS = True
TTS_VOICE = "en-US-Neural2-G"
LANGUAGE_CODE = "en-US"

# Camera
ENABLE_VIDEO = True
CAMERA_DEVICE = 0

# Logging
LOG_FILE = "./_interviews/interview.log"
LOG_LEVEL = "INFO"


# =============================================================================
# INTERNAL CONSTANTS - Don't change these unless you know what you're doing
# =============================================================================

# Session rules
MAX_QUESTIONS = 5
QUESTION_POINTS = 100 / MAX_QUESTIONS
SKIPPED_ANSWER = "[SKIPPED]"
NEUTRAL_METRIC = 0.5
METRIC_FLOOR = 0.05

# Pacing between questions (seconds)
ADVANCE_DELAY = 2.0
SKIP_END_DELAY = 1.0

# Telemetry
TELEMETRY_HISTORY_LIMIT = 50
RUNNING_METRICS_WINDOW = 20
NONVERBAL_WINDOW = 10
SNAPSHOT_INTERVAL = 3.0
HEARTBEAT_INTERVAL = 30.0

# HTTP
AI_SERVICE_TIMEOUT = 30
REPORT_TIMEOUT = 60

# Audio capture
SAMPLE_RATE_CAPTURE = 48000
SAMPLE_RATE_TARGET = 16000
CHANNELS = 1
FRAME_MS = 30
TARGET_RMS = 0.06
MAX_ANSWER_SECONDS = 300

# TTS technical
TTS_SAMPLE_RATE = 16000
TTS_SPEAKING_RATE = 0.92
TTS_PITCH = 1.05

# Session storage keys
SESSION_DATA_KEY = "interview_data_{session_id}"
SESSION_RESUME_KEY = "resume_{session_id}"
GENERIC_RESUME_KEY = "resumeData"


# =============================================================================
# MAIN CONFIG OBJECT
# =============================================================================

@dataclass
class Config:
    """Main configuration object."""
    ai_service_url: str = AI_SERVICE_URL
    telemetry_ws_url: str = TELEMETRY_WS_URL
    google_application_credentials: Optional[str] = None
    max_questions: int = MAX_QUESTIONS
    workdir: str = WORKDIR
    enable_tts: bool = ENABLE_TTS
    tts_voice: str = TTS_VOICE
    language_code: str = LANGUAGE_CODE
    enable_video: bool = ENABLE_VIDEO
    camera_device: int = CAMERA_DEVICE
    advance_delay: float = ADVANCE_DELAY
    skip_end_delay: float = SKIP_END_DELAY
    snapshot_interval: float = SNAPSHOT_INTERVAL
    heartbeat_interval: float = HEARTBEAT_INTERVAL
    request_timeout: float = AI_SERVICE_TIMEOUT
    report_timeout: float = REPORT_TIMEOUT
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _check_url(value: str, schemes: tuple, name: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in schemes or not parsed.netloc:
        raise ValueError(f"{name} must be a {'/'.join(schemes)} URL, got {value!r}")
    return value.rstrip("/")


def get_config() -> Config:
    """Load configuration, letting environment variables override the defaults above."""
    ai_service_url = os.getenv("AI_SERVICE_URL") or AI_SERVICE_URL
    telemetry_ws_url = os.getenv("TELEMETRY_WS_URL") or TELEMETRY_WS_URL
    workdir = os.getenv("INTERVIEW_WORKDIR") or WORKDIR

    return Config(
        ai_service_url=_check_url(ai_service_url, ("http", "https"), "AI_SERVICE_URL"),
        telemetry_ws_url=_check_url(telemetry_ws_url, ("ws", "wss"), "TELEMETRY_WS_URL"),
        google_application_credentials=os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
        workdir=workdir,
        enable_tts=_env_flag("ENABLE_TTS", ENABLE_TTS),
        enable_video=_env_flag("ENABLE_VIDEO", ENABLE_VIDEO),
        log_file=os.path.join(workdir, "interview.log"),
        log_level=(os.getenv("INTERVIEW_LOG_LEVEL") or LOG_LEVEL).upper(),
    )
