from datetime import datetime
from typing import Tuple, Dict, List, Optional, Set
from uuid import uuid4

from boto3.dynamodb.conditions import Key
from chalice import Response

from chalicelib.constants.status_codes import http200, http201
from chalicelib.constants.substitute_keys import from_db, to_db
from chalicelib.utils import db as utils_db, app as utils_app, data as utils_data, exceptions
from chalicelib.utils.data import substitute_keys
from chalicelib.utils.logger import logger


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


class EntityBase:
    pk = None
    sk = None

    # used in UI messages, e.g. 'Banner successfully created'
    record_name = 'Record'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }
    required_mutable_fields_validation = {}
    optional_fields_validation = {}

    def __init__(self, id_):
        self.id_: str = id_
        self.record_type: str = ''
        self.db_record: Dict = {}
        self.changed_fields: Optional[Set[str]] = None

    @classmethod
    def prepare_request_body(cls, request_body: Dict) -> Dict:
        """
        Should be re-implemented in child class if some fields depend on each other
        """
        return request_body

    @classmethod
    def init_request_create(cls, request, special_body=None):
        logger.info("init_request_create ::: started")
        request_body = special_body or utils_data.parse_raw_body(request)
        substitute_keys(dict_to_process=request_body, base_keys=to_db)
        request_body = cls.prepare_request_body(request_body)
        request_body.pop('id_', None)
        return cls(id_=str(uuid4()), **request_body)

    @classmethod
    def init_get_by_id(cls, id_):
        logger.info("init_get_by_id ::: started")
        c = cls(id_=id_)
        db_item = c._get_db_item()
        c.__init__(**db_item)
        c.db_record = db_item
        return c

    @classmethod
    def init_request_update(cls, request, id_, special_body=None):
        """
        Current db record overlaid with request body,
        only fields from the request body are written back
        """
        logger.info("init_request_update ::: started")
        request_body = special_body or utils_data.parse_raw_body(request)
        substitute_keys(dict_to_process=request_body, base_keys=to_db)
        request_body = cls.prepare_request_body(request_body)
        c = cls.init_get_by_id(id_)
        db_item = c.db_record
        c.__init__(**{**db_item, **request_body, 'id_': c.id_})
        c.db_record = db_item
        c.changed_fields = set(request_body.keys())
        return c

    @classmethod
    def query_records(cls, filter_expression=None) -> List['EntityBase']:
        db_records: List[Dict] = utils_db.query_items_paged(
            Key('partkey').eq(cls.pk),
            filter_expression=filter_expression
        )
        return [cls(**record) for record in db_records]

    @classmethod
    def list_filter_expression(cls, request):
        """
        Should be re-implemented in child class if list endpoint supports filters
        """
        return None

    @classmethod
    def sort_records(cls, records: List['EntityBase'], request) -> List['EntityBase']:
        return records

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_all(cls, request) -> Response:
        records = cls.sort_records(cls.query_records(cls.list_filter_expression(request)), request)
        items: List[Dict] = [record.to_ui() for record in records]
        logger.info(f"endpoint_get_all ::: returning {cls.pk}={[item['id'] for item in items]}")
        return Response(status_code=http200, body=items)

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_get_by_id(cls, id_) -> Response:
        item = cls.init_get_by_id(id_).to_ui()
        logger.info(f"endpoint_get_by_id ::: returning {cls.record_name} id={item['id']}")
        return Response(status_code=http200, body=item)

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_create(cls, request, special_body=None) -> Response:
        entity = cls.init_request_create(request, special_body=special_body)
        entity._create_db_record()
        return Response(status_code=http201, body={
            **entity.to_ui(),
            'message': f'{cls.record_name} successfully created',
            'id': entity.id_
        })

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_update(cls, request, id_, special_body=None) -> Response:
        entity = cls.init_request_update(request, id_, special_body=special_body)
        entity._update_db_record()
        return Response(status_code=http200, body={
            'message': f'{cls.record_name} was successfully updated',
            'id': entity.id_
        })

    @classmethod
    @utils_app.request_exception_handler
    @utils_app.log_start_finish
    def endpoint_delete(cls, id_) -> Response:
        entity = cls(id_=id_)
        entity._delete_db_record()
        return Response(status_code=http200, body={
            'message': f'{cls.record_name} was successfully deleted',
            'id': id_
        })

    def _get_pk_sk(self) -> Tuple[str, str]:
        """
        Should be re-implemented in each child class
        :return:
        partkey, sortkey of db item for child
        """
        return self.pk, self.sk

    def _get_db_item(self) -> Dict:
        return utils_db.get_db_item(*self._get_pk_sk())

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_
        }

    def _init_db_record(self) -> None:
        """
        New DB record initialization
        :return:
        None
        """
        pk, sk = self._get_pk_sk()
        self.db_record = {
            'partkey': pk,
            'sortkey': sk,
            'record_type': self.record_type,
            **self._to_dict()
        }

    @staticmethod
    def raise_validation_error(key, value=None):
        if value is None:
            message = f'Field {key} is required'
            logger.error(f"raise_validation_error ::: {message}")
            raise exceptions.MandatoryFieldsAreNotFilled(message)
        message = f'Validation error occurred while validating the field={key}'
        logger.error(f"raise_validation_error ::: {message}")
        raise exceptions.ValidationException(message)

    def _validate_mandatory_fields(self):
        """
        Validates mandatory fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key, self.db_record.get(key))

    def _validate_optional_fields(self):
        """
        Validates optional fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        for key, validator_func in self.optional_fields_validation.items():
            if self.db_record.get(key) is not None and validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key, self.db_record.get(key))

    def _fields_to_update(self) -> Set[str]:
        return set(self.changed_fields or []) | {'date_updated'}

    def _get_validated_update_dict(self) -> Dict:
        """
        Validates fields for update
        Raise ValidationException if a field sent by the client is not valid,
        immutable and unknown fields are skipped
        :return:
        Clean dict for update
        """
        update_dict = self._to_dict()
        fields_to_update = self._fields_to_update()
        sent_fields = set(self.changed_fields or [])
        clean_dict = {}
        validation_dict = {**self.required_mutable_fields_validation, **self.optional_fields_validation}
        for key in fields_to_update - set(update_dict.keys()):
            logger.warning(f'_get_validated_update_dict ::: unknown field {key=}, skipping..')
        for key, value in update_dict.items():
            if key not in fields_to_update:
                continue
            if key not in validation_dict:
                logger.warning(f'_get_validated_update_dict ::: {key=} is immutable, skipping..')
            elif validation_dict[key](value) is True:
                clean_dict[key] = value
            elif key in sent_fields and not (value is None and key in self.optional_fields_validation):
                self.raise_validation_error(key, value)
            else:
                logger.warning(f'_get_validated_update_dict ::: {key=}, {value=} is not valid, '
                               f'removing from update dict..')
        return clean_dict

    def _before_create(self) -> None:
        """
        Hook for values calculated on the server side right before the record is put to db
        """
        pass

    def _create_db_record(self) -> None:
        """
        Creates entity db record
        :return:
        None
        """
        self._before_create()
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        utils_db.put_db_record(self.db_record)
        logger.info(f"_create_db_record ::: {self.record_type=} {self.id_=} {self.db_record.get('partkey')=} "
                    f"{self.db_record.get('sortkey')=} successfully created")

    def _update_fields_whitelist(self) -> List:
        return [*self.required_mutable_fields_validation.keys(), *self.optional_fields_validation.keys()]

    def _update_db_record(self):
        """
        Updates entity db record
        :return:
        None
        """
        pk, sk = self._get_pk_sk()
        self.date_updated = now_iso()
        update_dict = self._get_validated_update_dict()
        utils_db.update_db_record(
            key={'partkey': pk, 'sortkey': sk},
            update_body=update_dict,
            allowed_attrs_to_update=self._update_fields_whitelist(),
            allowed_attrs_to_delete=[]
        )
        logger.info(f"_update_db_record ::: {self.record_type=} "
                    f"{self.id_=} {pk=} {sk=} successfully updated, fields={sorted(update_dict.keys())}")

    def _delete_db_record(self):
        pk, sk = self._get_pk_sk()
        utils_db.delete_db_record(pk, sk)
        logger.info(f"_delete_db_record ::: {self.record_type=} {self.id_=} {pk=} {sk=} successfully deleted")

    def to_ui(self) -> Dict:
        item = self._to_dict()
        substitute_keys(dict_to_process=item, base_keys=from_db)
        return item
