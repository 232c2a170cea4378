from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class ClusterSpecification(BaseModel):
    model_config = ConfigDict(frozen=True)

    master_memory_mb: int = Field(gt=0, description='Memory of the JobManager container in MB')
    task_manager_memory_mb: int = Field(gt=0, description='Memory of each TaskManager container in MB')
    slots_per_task_manager: int = Field(default=1, ge=1)


@dataclass(frozen=True)
class Endpoint:
    address: str
    port: int

    def __str__(self):
        return f'{self.address}:{self.port}'
