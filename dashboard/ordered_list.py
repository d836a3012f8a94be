import asyncio
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Type

from chalicelib.utils.logger import logger
from dashboard.errors import DashboardError, FormValidationError
from dashboard.forms import EntityForm
from dashboard.notifications import Notifier

SORT_BY_ORDER = 'order'
SORT_BY_STATUS = 'status'

UP = 'up'
DOWN = 'down'

# key of the in-flight guard for a record that doesn't exist yet
NEW_RECORD = '__new__'


class ActionState(Enum):
    IDLE = 'idle'
    VALIDATING = 'validating'
    REJECTED = 'rejected'
    SUBMITTING = 'submitting'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    REFETCHING = 'refetching'


def sort_records(records: List[Dict], sort=SORT_BY_ORDER) -> List[Dict]:
    """
    Ascending by order, records without order go last.
    SORT_BY_STATUS puts active records before inactive ones.
    """
    def sort_key(record):
        status_key = (not record.get('is_active', False),) if sort == SORT_BY_STATUS else ()
        order = record.get('order')
        return (*status_key, order is None, order or 0)
    return sorted(records, key=sort_key)


class OrderedContentListController:
    """
    Server backed list of orderable records (banners, gallery images, testimonials).

    The local list is never trusted past a round trip: every successful mutation,
    and every move whatever its outcome, ends with a fresh `refresh()`.
    Failures are reported through the notifier and never raised to the caller.
    """

    def __init__(self, api, form_class: Type[EntityForm], notifier: Optional[Notifier] = None,
                 confirm: Optional[Callable[[str], bool]] = None, sort=SORT_BY_ORDER,
                 on_state_change: Optional[Callable[[ActionState], None]] = None):
        self.api = api
        self.form_class = form_class
        self.collection = form_class.collection
        self.notifier = notifier or Notifier()
        self.confirm = confirm
        self.sort = sort
        self.on_state_change = on_state_change

        self.records: List[Dict] = []
        self.form: Optional[EntityForm] = None
        self.state = ActionState.IDLE
        self._in_flight: Set[str] = set()

    def _set_state(self, state: ActionState) -> None:
        logger.debug(f'OrderedContentListController ::: {self.collection} {self.state.value} -> {state.value}')
        self.state = state
        if self.on_state_change is not None:
            self.on_state_change(state)

    def is_busy(self, record_id=NEW_RECORD) -> bool:
        return record_id in self._in_flight

    def _index_of(self, record: Dict) -> int:
        for index, item in enumerate(self.records):
            if item.get('id') == record.get('id'):
                return index
        return -1

    def _neighbour_index(self, record: Dict, direction) -> Optional[int]:
        if direction not in (UP, DOWN):
            raise ValueError(f'Unknown move direction {direction}')
        index = self._index_of(record)
        if index == -1:
            return None
        neighbour_index = index - 1 if direction == UP else index + 1
        if neighbour_index < 0 or neighbour_index >= len(self.records):
            return None
        # sorted by status, active and inactive records are separate groups,
        # swapping order across the groups would not change their positions
        if self.sort == SORT_BY_STATUS and \
                self.records[index].get('is_active', False) != self.records[neighbour_index].get('is_active', False):
            return None
        return neighbour_index

    def can_move(self, record: Dict, direction) -> bool:
        return self._neighbour_index(record, direction) is not None

    async def refresh(self) -> List[Dict]:
        try:
            records = await asyncio.to_thread(self.api.list, self.collection)
        except DashboardError as error:
            self.notifier.error(str(error), title=f'Failed to load {self.collection}')
            return self.records
        self.records = sort_records(records, self.sort)
        logger.info(f'refresh ::: {self.collection} ids={[record.get("id") for record in self.records]}')
        return self.records

    async def _submit(self, guard_key: str, call: Callable, success_message: str, form=None) -> bool:
        """
        Runs one mutating call through the action state machine
        """
        if guard_key in self._in_flight:
            logger.warning(f'_submit ::: {self.collection} {guard_key=} already has an action in flight, skipping..')
            return False

        self._set_state(ActionState.VALIDATING)
        if form is not None:
            missing_fields = form.validate()
            if missing_fields:
                error = FormValidationError(form.missing_fields_message(missing_fields), missing_fields)
                logger.info(f'_submit ::: {self.collection} rejected, {missing_fields=}')
                self._set_state(ActionState.REJECTED)
                self.notifier.error(str(error), title='Validation error')
                self._set_state(ActionState.IDLE)
                return False

        self._in_flight.add(guard_key)
        self._set_state(ActionState.SUBMITTING)
        try:
            await asyncio.to_thread(call)
        except DashboardError as error:
            self._set_state(ActionState.FAILED)
            self.notifier.error(str(error))
            self._set_state(ActionState.IDLE)
            return False
        finally:
            self._in_flight.discard(guard_key)

        self._set_state(ActionState.SUCCEEDED)
        self.notifier.success(success_message)
        self._set_state(ActionState.REFETCHING)
        await self.refresh()
        self._set_state(ActionState.IDLE)
        return True

    def open_form(self, record: Optional[Dict] = None) -> EntityForm:
        self.form = self.form_class.from_record(record) if record else self.form_class()
        return self.form

    def close_form(self) -> None:
        self.form = None

    async def save(self) -> bool:
        """
        Submits the open form, the form is closed only on success
        """
        if self.form is None:
            raise ValueError('No form is open')
        form = self.form
        record_name = form.record_name
        if form.is_new:
            succeeded = await self._submit(
                NEW_RECORD,
                lambda: self.api.create(self.collection, form.to_payload()),
                f'{record_name} created successfully',
                form=form
            )
        else:
            succeeded = await self._submit(
                form.record_id,
                lambda: self.api.update(self.collection, form.record_id, form.to_payload()),
                f'{record_name} updated successfully',
                form=form
            )
        if succeeded and self.form is form:
            self.close_form()
        return succeeded

    async def create(self, fields: Dict) -> bool:
        self.form = self.form_class(**fields)
        return await self.save()

    async def update(self, record_id: str, fields: Dict) -> bool:
        """
        PUT with the given fields only
        """
        return await self._submit(
            record_id,
            lambda: self.api.update(self.collection, record_id, fields),
            f'{self.form_class.record_name} updated successfully'
        )

    async def delete(self, record: Dict) -> bool:
        record_name = self.form_class.record_name
        if self.confirm is None or not self.confirm(f'Are you sure you want to delete this {record_name.lower()}?'):
            logger.info(f'delete ::: {self.collection} id={record.get("id")} not confirmed')
            return False
        return await self._submit(
            record['id'],
            lambda: self.api.delete(self.collection, record['id']),
            f'{record_name} deleted successfully'
        )

    async def toggle_active(self, record: Dict) -> bool:
        return await self.update(record['id'], {'is_active': not record.get('is_active', False)})

    async def move(self, record: Dict, direction) -> bool:
        """
        Swaps `order` with the neighbour in the current list,
        both updates run concurrently and the list is refetched once both settle
        """
        neighbour_index = self._neighbour_index(record, direction)
        if neighbour_index is None:
            logger.info(f'move ::: {self.collection} id={record.get("id")} {direction=} is out of bounds, no-op')
            return False
        current = self.records[self._index_of(record)]
        neighbour = self.records[neighbour_index]
        guard_keys = {current['id'], neighbour['id']}
        if guard_keys & self._in_flight:
            logger.warning(f'move ::: {self.collection} {sorted(guard_keys)} already have an action in flight, skipping..')
            return False

        self._set_state(ActionState.VALIDATING)
        self._in_flight |= guard_keys
        self._set_state(ActionState.SUBMITTING)
        try:
            results = await asyncio.gather(
                asyncio.to_thread(self.api.update, self.collection, current['id'], {'order': neighbour.get('order')}),
                asyncio.to_thread(self.api.update, self.collection, neighbour['id'], {'order': current.get('order')}),
                return_exceptions=True
            )
        finally:
            self._in_flight -= guard_keys

        errors = [result for result in results if isinstance(result, BaseException)]
        for error in errors:
            if not isinstance(error, DashboardError):
                raise error

        if errors:
            self._set_state(ActionState.FAILED)
            for error in errors:
                self.notifier.error(str(error), title='Failed to reorder')
        else:
            self._set_state(ActionState.SUCCEEDED)
        self._set_state(ActionState.REFETCHING)
        await self.refresh()
        self._set_state(ActionState.IDLE)
        return not errors
