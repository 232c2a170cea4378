from pydantic import BaseModel, ConfigDict, Field

from flinkpilot.core.configuration.configuration import Configuration
from flinkpilot.core.configuration.options import ApplicationOptions


class ApplicationConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    program_arguments: list[str] = Field(default_factory=list)
    application_class_name: str | None = None

    def apply_to_configuration(self, configuration: Configuration) -> None:
        configuration.set(ApplicationOptions.APPLICATION_ARGS, list(self.program_arguments))

        if self.application_class_name is not None:
            configuration.set(ApplicationOptions.APPLICATION_MAIN_CLASS, self.application_class_name)

    @classmethod
    def from_configuration(cls, configuration: Configuration) -> 'ApplicationConfiguration':
        return cls(
            program_arguments=configuration.get(ApplicationOptions.APPLICATION_ARGS, []),
            application_class_name=configuration.get(ApplicationOptions.APPLICATION_MAIN_CLASS),
        )
