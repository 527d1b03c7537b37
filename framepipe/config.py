"""Configuration records for the pipeline nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

Fence = list[tuple[float, float]]


@dataclass
class BaseData:
    """Settings shared by every node configuration."""

    max_pop_batch_size: int = 1
    create_time: datetime = field(
        default_factory=datetime.now, init=False, compare=False, repr=False
    )


@dataclass
class StreamConfigData(BaseData):
    owner_pipeline_id: str = ""
    stream_name: str = ""
    stream_url: str = ""
    decode_type: str = ""  # CPU, GPU or FOLDER
    skip_frame: int = 1
    gpu_id: int = -1


@dataclass
class InferConfigData(BaseData):
    model_path: str = ""
    model_type: str = ""
    names_path: str = ""
    max_batch_size: int = 1
    conf_threshold: float = 0.0
    nms_threshold: float = 0.0
    gpu_id: int = 0
    auto_slice: bool = False
    slice_width: int = 0
    slice_height: int = 0
    slice_horizontal_ratio: float = 0.0
    slice_vertical_ratio: float = 0.0


@dataclass
class OsdConfigData(BaseData):
    show_final_result: bool = True
    show_original_result: bool = False
    font_size: int = 1


@dataclass
class GstPipelineElement:
    """One element of a GStreamer pipeline description and its properties."""

    element_type: str = ""
    properties: dict[str, str] = field(default_factory=dict)


@dataclass
class RecordConfigData(BaseData):
    pipeline_elements: list[GstPipelineElement] = field(default_factory=list)

    def build_gst_pipeline_string(self) -> str:
        """Join the elements into a launch string, properties sorted by name."""
        parts = []
        for element in self.pipeline_elements:
            props = "".join(
                f" {key}={value}" for key, value in sorted(element.properties.items())
            )
            parts.append(element.element_type + props)
        return " ! ".join(parts)


@dataclass
class HttpConfigData(BaseData):
    pass


@dataclass
class TrackingConfigData(BaseData):
    frame_rate: int = 30
    track_buffer: int = 30
    track_label: str = ""


@dataclass
class AnalyzeConfigData(BaseData):
    task_name: str = ""
    fences: list[Fence] = field(default_factory=list)


@dataclass
class RouterConfigData(BaseData):
    pass