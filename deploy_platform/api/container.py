#deploy_platform\api\container.py
from uuid import UUID

from fastapi import Request

from deploy_platform.container import Container
from deploy_platform.core.errors import EntityNotFound


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_user_service(request: Request):
    return get_container(request).user_service


def get_network_service(request: Request):
    return get_container(request).network_service


def get_log_service(request: Request):
    return get_container(request).log_service


def get_reporting_service(request: Request):
    return get_container(request).reporting_service


def get_system_service(request: Request):
    return get_container(request).system_service


def parse_id(value: str, message: str) -> UUID:
    """Path ids that are not UUIDs cannot match a record."""
    try:
        return UUID(value)
    except ValueError:
        raise EntityNotFound(message)
