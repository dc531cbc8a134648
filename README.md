# featgroup

Group tracked feature points into moving objects. Each point becomes a
track, and tracks that start close together are linked. Each link records
the smallest and the largest distance ever seen between its two tracks. A
link is cut once that spread grows too large. Connected groups of activated
tracks are the objects.

The package also has:

- descriptor distances: `L1Distance`, `L2Distance` and
  `PearsonCoefficientDistance` (`featgroup.distance`)
- a normalised colour histogram descriptor, `NCHDescriptorExtractor`
  (`featgroup.nch`)
- a row splitter for matrices, `split_mat` with `SplitMode`
  (`featgroup.splitter`)
- helpers to read and write whitespace-separated float matrices, and to map
  points between image and world coordinates through a homography
  (`featgroup.misc`)

## Installation

```
pip install .
```

The only dependency is `numpy`.

## Grouping tracks

```python
from featgroup.track_manager import TrackManager

with TrackManager(
    min_num_frame_tracked=4,
    min_distance_moved_required=3,
    maximum_distance_threshold=20,
    feature_segmentation_threshold=50,
    min_distance_between_tracks=20,
    log_track_to_file=False,
) as manager:
    ids = manager.add_possibly_duplicate_points([(0.0, 0.0), (10.0, 0.0)])

    for frame in range(1, 6):
        manager.advance_to_next_frame()
        manager.update_points([(5.0 * frame, 0.0), (10.0 + 5.0 * frame, 0.0)], ids)

    for component in manager.connected_components():
        print([track.id for track in component])
```

How `TrackManager` behaves:

- `add_points` adds every point as a new track. The new track is linked to
  each existing track within `maximum_distance_threshold`.
- `add_possibly_duplicate_points` skips any point that duplicates an
  existing track and returns that track's id in its place. A point is a
  duplicate when `|dx + dy|` is below `min_distance_between_tracks`.
- `remove_duplicate_points` returns only the points that are not duplicates.
- `update_points(new_points, ids)` moves the tracks with the given ids and
  updates the distance range of their links. It then does four things:
  - It activates every track that has been tracked at least
    `min_num_frame_tracked` times.
  - It removes a track if any of its last `min_num_frame_tracked - 2` moves
    was shorter than `min_distance_moved_required`.
  - It cuts every link whose distance range exceeds
    `feature_segmentation_threshold`.
  - An unknown id raises `KeyError`.
- `connected_components()` groups copies of the activated tracks.
  `connected_components_map()` returns one label per track plus the number
  of components. Inactive tracks get the label `num_tracks()`.
- `tracks()`, `all_tracks_position_and_id()`, `edge_information(i, j)`,
  `num_tracks()` and `num_connections()` report the current state.
  `copy()` returns an independent copy that never logs.
- With `log_track_to_file=True`, each update writes one line per track to
  `TrackManager.log` in the working directory. The line holds the time
  stamp, the id, x, y, whether the track is active, and the ids of its
  neighbours. Call `close()` to close the log, or use the manager as a
  context manager.

The graph underneath is `featgroup.tracks.TrackGraph`. It holds
`TrackInformation` tracks joined by `LinkInformation` links. The labelling
is done by `featgroup.components.component_map`, a depth-first search over
an adjacency list.

## Distances and descriptors

```python
import numpy as np
from featgroup.distance import L2Distance, PearsonCoefficientDistance
from featgroup.nch import NCHDescriptorExtractor

a = np.array([[1.0, 2.0, 3.0]], dtype=np.float32)
b = np.array([[2.0, 4.0, 6.5]], dtype=np.float32)
print(L2Distance()(a, b), PearsonCoefficientDistance()(a, b))

extractor = NCHDescriptorExtractor(8)
histogram = extractor.compute_dense(np.random.rand(16, 16, 3))  # shape (8, 8, 8), sums to 1
```

Descriptor rules:

- `PearsonCoefficientDistance` needs float32 descriptors. It compares their
  first rows and returns `1 - |r|`.
- `NCHDescriptorExtractor` skips pixels that hold `-1` in any channel.
  It raises `ValueError` if no valid pixels remain.

## Splitting matrices

```python
import numpy as np
from featgroup.splitter import SplitMode, split_mat

top, bottom = split_mat(np.arange(10).reshape(5, 2), SplitMode.UL)  # 3 rows, 2 rows
```

Behaviour of each mode:

- `SplitMode.NONE` returns the matrix whole.
- `SplitMode.ULF` raises `ValueError`.

## Coordinates and text matrices

```python
import numpy as np
from featgroup.misc import (
    convert_point_to_image_coordinate,
    convert_to_world_coordinate,
    loadtxt,
    write_txt,
)

homography = np.array([[2.0, 0.0, 1.0], [0.0, 2.0, 0.0], [0.0, 0.0, 1.0]])
world = convert_to_world_coordinate([(10.0, 20.0)], homography)  # [[21., 40.]]
image = convert_point_to_image_coordinate((21.0, 40.0), homography)  # (10.0, 20.0)

write_txt("out.txt", np.array([[1.0, 2.0]], dtype=np.float32))

with open("in.txt", "w") as handle:
    handle.write("1 2\n3 4\n")
print(loadtxt("in.txt"))  # 2x2 float32 matrix
```

Behaviour of the helpers:

- `loadtxt` takes the column count from the first line: one more than the
  number of spaces and tabs it contains. Trailing whitespace on that line
  therefore counts as extra columns.
- `write_txt` follows every value with a tab, so its output does not load
  back with `loadtxt`.
- `convert_to_image_coordinate` inverts the image-to-world homography
  before applying it.

## What the package does not do

The package works on points, arrays and histograms you give it:

- It does not read video or images.
- It does not detect or follow features from frame to frame.
- It does not draw tracks or show windows.
- It has no command-line program.

## Tests

```
pip install .[test]
pytest
```