# =============================================================================
# hospital_core/services/messages.py
# Fixed user-facing error messages per operation
# =============================================================================

from typing import Dict

DEFAULT_LOCALE = "ko"

MESSAGES: Dict[str, Dict[str, str]] = {
    "ko": {
        "load": "데이터를 불러오는 중 오류가 발생했습니다.",
        "add": "병원을 추가하는 중 오류가 발생했습니다.",
        "update": "병원을 업데이트하는 중 오류가 발생했습니다.",
        "delete": "병원을 삭제하는 중 오류가 발생했습니다.",
    },
    "en": {
        "load": "An error occurred while loading data.",
        "add": "An error occurred while adding the hospital.",
        "update": "An error occurred while updating the hospital.",
        "delete": "An error occurred while deleting the hospital.",
    },
}


def get_messages(locale: str = DEFAULT_LOCALE) -> Dict[str, str]:
    """Messages for ``locale``; unknown locales get the default set."""
    return dict(MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE]))
