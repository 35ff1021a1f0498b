import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.costing import CostingTemplate, LoggedCalculation
from app.services.utils.costing_utils import (
    CostBreakdown,
    calculate_costs,
    merge_inputs,
    merge_pricing,
)

logger = logging.getLogger(__name__)


class CostingService:
    def __init__(self, db: Session):
        self.db = db
        self.last_error_message: Optional[str] = None
        self.last_error_code: Optional[str] = None

    def _set_error(self, message: str, code: str = "invalid_request") -> None:
        self.last_error_message = message
        self.last_error_code = code
        logger.error(message)

    def calculate(self, inputs: Dict = None, pricing: Dict = None) -> CostBreakdown:
        return calculate_costs(inputs, pricing)

    # Calculation log

    def log_calculation(
        self, inputs: Dict = None, pricing: Dict = None
    ) -> Optional[LoggedCalculation]:
        """Calculate and keep the result together with its inputs."""
        try:
            inputs = merge_inputs(inputs)
            pricing = merge_pricing(pricing)
            breakdown = calculate_costs(inputs, pricing)
            entry = LoggedCalculation(
                job_name=inputs.get("job_name") or None,
                inputs=inputs,
                pricing=pricing,
                results=breakdown.to_dict(),
            )
            self.db.add(entry)
            self.db.commit()
            logger.info(
                f"Logged calculation for {entry.job_name or 'unnamed job'}: "
                f"subtotal {breakdown.subtotal:.2f} {inputs['currency']}"
            )
            return entry
        except Exception as e:
            self._set_error(f"Error logging calculation: {str(e)}")
            self.db.rollback()
            return None

    def list_logged(self) -> List[LoggedCalculation]:
        """Logged calculations, newest first"""
        return self.db.query(LoggedCalculation).order_by(LoggedCalculation.id.desc()).all()

    def get_logged(self, log_id: int) -> Optional[LoggedCalculation]:
        return self.db.query(LoggedCalculation).filter(LoggedCalculation.id == log_id).first()

    def delete_logged(self, log_id: int) -> bool:
        try:
            entry = self.get_logged(log_id)
            if not entry:
                self._set_error(f"Logged calculation {log_id} not found", "not_found")
                return False
            self.db.delete(entry)
            self.db.commit()
            return True
        except Exception as e:
            self._set_error(f"Error deleting logged calculation: {str(e)}")
            self.db.rollback()
            return False

    # Templates

    def save_template(
        self, name: str, inputs: Dict = None, pricing: Dict = None
    ) -> Optional[CostingTemplate]:
        if not name or not name.strip():
            self._set_error("A template needs a name")
            return None
        try:
            template = CostingTemplate(
                name=name.strip(), inputs=merge_inputs(inputs), pricing=merge_pricing(pricing)
            )
            self.db.add(template)
            self.db.commit()
            logger.info(f"Saved costing template {template.name}")
            return template
        except Exception as e:
            self._set_error(f"Error saving costing template: {str(e)}")
            self.db.rollback()
            return None

    def list_templates(self) -> List[CostingTemplate]:
        return self.db.query(CostingTemplate).order_by(CostingTemplate.id).all()

    def get_template(self, template_id: int) -> Optional[CostingTemplate]:
        return self.db.query(CostingTemplate).filter(CostingTemplate.id == template_id).first()

    def update_template(
        self, template_id: int, name: str = None, inputs: Dict = None, pricing: Dict = None
    ) -> Optional[CostingTemplate]:
        """Rename a template or replace its inputs or pricing."""
        try:
            template = self.get_template(template_id)
            if not template:
                self._set_error(f"Costing template {template_id} not found", "not_found")
                return None
            if name is not None:
                if not name.strip():
                    self._set_error("A template needs a name")
                    return None
                template.name = name.strip()
            if inputs is not None:
                template.inputs = merge_inputs(inputs)
            if pricing is not None:
                template.pricing = merge_pricing(pricing)
            self.db.commit()
            logger.info(f"Updated costing template {template.name}")
            return template
        except Exception as e:
            self._set_error(f"Error updating costing template: {str(e)}")
            self.db.rollback()
            return None

    def delete_template(self, template_id: int) -> bool:
        try:
            template = self.get_template(template_id)
            if not template:
                self._set_error(f"Costing template {template_id} not found", "not_found")
                return False
            name = template.name
            self.db.delete(template)
            self.db.commit()
            logger.info(f"Deleted costing template {name}")
            return True
        except Exception as e:
            self._set_error(f"Error deleting costing template: {str(e)}")
            self.db.rollback()
            return False

    def calculate_template(self, template_id: int) -> Optional[CostBreakdown]:
        template = self.get_template(template_id)
        if not template:
            self._set_error(f"Costing template {template_id} not found", "not_found")
            return None
        return calculate_costs(template.inputs, template.pricing)
