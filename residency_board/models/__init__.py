"""SQLAlchemy models."""

from residency_board.models.company import Company
from residency_board.models.company_alias import CompanyAlias
from residency_board.models.job_run import JobRun
from residency_board.models.login_attempt import LoginAttempt
from residency_board.models.residency import Residency

__all__ = [
    "Company",
    "CompanyAlias",
    "JobRun",
    "LoginAttempt",
    "Residency",
]
