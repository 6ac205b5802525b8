from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .builder.service import FormBuilder
from .calculation.engine import CalculationEngine
from .calculation.factory import CalculatorFactory
from .conditions.engine import ConditionalLogicEngine
from .database.connection import DBConfig, DatabaseConnection
from .forms.mysql_form_template_repository import MySQLFormTemplateRepository
from .forms.repository import FormTemplateRepository
from .forms.service import FormTemplateService
from .submission.evaluator import FormSubmissionEvaluator
from .validation.engine import ValidationEngine
from .validation.factory import ValidationRuleFactory


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    form_templates_repo: FormTemplateRepository

    form_builder: FormBuilder
    evaluator: FormSubmissionEvaluator
    form_template_service: FormTemplateService


def build_evaluator(*, validation_factory: Optional[ValidationRuleFactory] = None) -> FormSubmissionEvaluator:
    conditions = ConditionalLogicEngine()
    return FormSubmissionEvaluator(
        conditions=conditions,
        calculations=CalculationEngine(CalculatorFactory(), conditions=conditions),
        validation=ValidationEngine(validation_factory or ValidationRuleFactory()),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    form_templates_repo = MySQLFormTemplateRepository(conn)

    form_builder = FormBuilder()
    evaluator = build_evaluator()
    form_template_service = FormTemplateService(form_templates_repo, builder=form_builder, evaluator=evaluator)

    return Container(
        conn=conn,
        form_templates_repo=form_templates_repo,
        form_builder=form_builder,
        evaluator=evaluator,
        form_template_service=form_template_service,
    )
