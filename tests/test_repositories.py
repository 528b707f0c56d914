"""Repository classes that expose a ``list`` method keep builtin ``list`` annotations."""

import typing

import pytest

from recruitment.repositories.candidature_repository import CandidatureRepository
from recruitment.repositories.job_application_repository import JobApplicationRepository
from recruitment.repositories.language_repository import LanguageRepository
from recruitment.repositories.logical_test_repository import LogicalTestRepository


@pytest.mark.unit
@pytest.mark.parametrize(
    "method",
    [
        CandidatureRepository.count_exams_between,
        CandidatureRepository.list_transitions,
        LogicalTestRepository.list_classifications,
        LogicalTestRepository.add_classification,
        LanguageRepository.get_active_codes,
        JobApplicationRepository.count_by_status,
    ],
)
def test_annotations_after_list_method_resolve(method):
    assert "return" in typing.get_type_hints(method)


@pytest.mark.unit
def test_list_annotations_are_the_builtin_list():
    hints = typing.get_type_hints(LogicalTestRepository.add_classification)
    assert typing.get_origin(hints["translations"]) is list
    hints = typing.get_type_hints(CandidatureRepository.count_exams_between)
    assert typing.get_origin(hints["statuses"]) is list
    hints = typing.get_type_hints(LogicalTestRepository.list_classifications)
    assert typing.get_origin(hints["return"]) is list
