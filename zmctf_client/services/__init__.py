"""이 파일은 .py 서비스 패키지 초기화 모듈로 핵심 서비스를 노출합니다."""

from .analysis import AnalysisSummary, FlagDetector, InputMode, SelectedFile
from .config_editor import ConfigEditor
from .health import HealthPoller
from .lifecycle import ActionKind, ActionOutcome, ActionState, LifecycleController, Phase
from .state import AppState, Connectivity
from .workbench import Workbench

__all__ = [
    "ActionKind",
    "ActionOutcome",
    "ActionState",
    "AnalysisSummary",
    "AppState",
    "ConfigEditor",
    "Connectivity",
    "FlagDetector",
    "HealthPoller",
    "InputMode",
    "LifecycleController",
    "Phase",
    "SelectedFile",
    "Workbench",
]
