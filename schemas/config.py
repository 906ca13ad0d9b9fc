# Software Engineer: Kyeshav Chettiar 
# Company FXO - Adcorp 
# Configured and pushed onto the virtual machine for testing and evaluation for team members to use within the companies rules and regulations 
# v3.0.0.0 

from pydantic import BaseModel, Field, model_validator


class DetentionConfigSchema(BaseModel):
    urgent_days: int = Field(..., ge=0)
    warning_days: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_thresholds(self):
        if self.urgent_days > self.warning_days:
            raise ValueError("urgent_days must not exceed warning_days")
        return self
