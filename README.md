# framepipe

Building blocks for frame-processing pipelines: bounded thread-safe queues
with overflow strategies, worker nodes that pull batches from their input
queues and push them to their output queues, a geofence "entered" analyzer,
and a ByteTrack-style multi-object tracker (Kalman filter, Jonker-Volgenant
assignment, IoU matching).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `framepipe.affine`: `crop_resize_matrix`, `resize_matrix` and
  `letterbox_matrix` build an `AffineMatrix` holding a forward (`i2d`) and
  inverse (`d2i`) 2x3 matrix; `to_network(x, y)` and `to_image(x, y)` map
  points between image and network coordinates.
- `framepipe.norm`: `Norm` settings built by `mean_std`, `alpha_beta` and
  `no_norm`; `Norm.apply(values)` normalises a numpy array whose last axis
  holds 3 channels, optionally swapping red and blue (`ChannelType.SWAP_RB`).
- `framepipe.formatting`: `str_format(fmt, *args)` formats printf-style
  strings, ignoring C length modifiers such as `l` or `z`; raises
  `ValueError` if the arguments do not fit.
- `framepipe.timer`: `Timer`, a stopwatch that prints its elapsed time once
  through `stop_print()`; also a context manager.
- `framepipe.config`: dataclass configuration records (`StreamConfigData`,
  `InferConfigData`, `OsdConfigData`, `RecordConfigData`,
  `TrackingConfigData`, `AnalyzeConfigData`, ...).
  `RecordConfigData.build_gst_pipeline_string()` joins its
  `GstPipelineElement`s into a launch string with `" ! "`, properties sorted
  by name.
- `framepipe.objects`: detection results (`Box`, `OBBox`, `KeyPoint`,
  `PoseInstance`, `SegmentMap`, `SegmentationInstance`, `TrackingInstance`)
  and the per-frame record `FrameData`.
- `framepipe.polygon`: `Polygon` with `area()`, `intersection_area(other)`
  and `is_valid()`, computed with shapely.
- `framepipe.shared_queue`: `SharedQueue`, a bounded FIFO whose behaviour
  when full is set by `OverflowStrategy` (`BLOCK`, `DROP_EARLY`,
  `DROP_LATE`, `DROP_ALL`). `push` returns `False` when an item is dropped
  under `DROP_LATE`; `pop(timeout)` raises `TimeoutError` when nothing
  arrives; `pop_batch(n)` never waits.
- `framepipe.nodes.base`: `BaseNode`, an abstract node running `work()` on
  its own thread and calling `handle_data(batch)` for each batch, and
  `link_node(front, back, pipeline_id, queue_size, strategy)` which connects
  two nodes with a new queue and returns it.
- `framepipe.nodes.analyze`: `AnalyzeNode` runs the analyzer named by its
  config's `task_name`; `EnteredAnalyzer` adds an `"entered"` result for every
  `"person"` pose box lying more than half inside any fence (or every person
  when no fences are set).
- `framepipe.tracking.kalman`: `KalmanFilter` over (x, y, aspect, height).
- `framepipe.tracking.lapjv`: `solve_dense(cost)` for square matrices and
  `lapjv(cost, extend_cost, cost_limit, return_cost)` returning
  `(total_cost, rowsol, colsol)`.
- `framepipe.tracking.strack`: `STrack` and `TrackState`.
- `framepipe.tracking.matching`: `ious`, `iou_distance`,
  `linear_assignment`, `joint_stracks`, `sub_stracks`,
  `remove_duplicate_stracks` and `get_color`.
- `framepipe.tracking.byte_tracker`: `ByteTracker` and `TrackedObject`.

## Example: an analyze node

```python
from framepipe.config import AnalyzeConfigData
from framepipe.nodes.analyze import AnalyzeNode
from framepipe.nodes.base import link_node
from framepipe.shared_queue import SharedQueue

config = AnalyzeConfigData(task_name="entered")
config.fences = [[(0, 0), (100, 0), (100, 100), (0, 100)]]

analyzer = AnalyzeNode("analyze", config)
inbox = SharedQueue("pipeline-1", 40)
outbox = SharedQueue("pipeline-1", 40)
analyzer.add_input_queue("source", inbox)
analyzer.add_output_queue("sink", outbox)

with analyzer:  # start() on entry, stop() on exit
    ...  # push FrameData into inbox, pop results from outbox
```

Between two nodes of your own, `link_node(front, back, "pipeline-1")`
creates and wires the queue for you.

## Example: tracking

```python
from framepipe.tracking.byte_tracker import ByteTracker, TrackedObject

tracker = ByteTracker(frame_rate=30, track_buffer=30)
tracks = tracker.update([TrackedObject(rect=(10.0, 20.0, 50.0, 80.0), label=0, prob=0.9)])
for track in tracks:
    print(track.track_id, track.tlbr)
```

## What the package does not do

The package holds the data types, queues, node framework, analysis and
tracking. It does not decode video streams, run model inference, draw
results onto frames, record or push streams, or build pipelines from a
configuration file, and it has no command-line program. The configuration
records for those stages exist only as data; nodes for them are left for
you to write on top of `BaseNode`.