from typing import List, NamedTuple

from chalicelib.utils.logger import logger

SUCCESS = 'success'
ERROR = 'error'


class Toast(NamedTuple):
    title: str
    description: str
    variant: str


class Notifier:
    """
    Toast queue shown to the dashboard user
    """

    def __init__(self):
        self.toasts: List[Toast] = []

    def _push(self, title, description, variant):
        self.toasts.append(Toast(title=title, description=description, variant=variant))

    def success(self, description, title='Success'):
        logger.info(f'Notifier ::: {title}: {description}')
        self._push(title, description, SUCCESS)

    def error(self, description, title='Error'):
        logger.warning(f'Notifier ::: {title}: {description}')
        self._push(title, description, ERROR)

    @property
    def errors(self) -> List[Toast]:
        return [toast for toast in self.toasts if toast.variant == ERROR]

    @property
    def last(self):
        return self.toasts[-1] if self.toasts else None
