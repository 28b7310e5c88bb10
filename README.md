# motionkit

Classic motion-planning, path-tracking and perception algorithms for
wheeled robots and car-like vehicles, built on NumPy, with optional
Matplotlib drawing.

## What is inside

| Module | Contents |
| --- | --- |
| `motionkit.geometry` | `sign`, `pi_2_pi` angle wrapping, `rotation_matrix2d`, `transformation_matrix2d`, `diff`, `cumsum`, `search_index`, `variance`, and a `TicToc` stopwatch in milliseconds |
| `motionkit.vehicle` | `Gear`, `VehicleConfig` (dimensions, steering and speed limits, `VehicleConfig.scaled`), `VehicleState` with a kinematic bicycle `update` and `calc_distance` |
| `motionkit.drawing` | `arrow_lines`, `vehicle_outlines`, `trailer_outlines` as NumPy arrays, and `draw_arrow`, `draw_vehicle`, `draw_trailer` on a Matplotlib axes |
| `motionkit.polynomials` | `QuarticPolynomial` and `QuinticPolynomial` boundary-value trajectories with derivatives up to the third |
| `motionkit.road_line` | `CruiseRoadLine` (closed circuit) and `StopRoadLine` (straight road) reference lines and boundaries |
| `motionkit.pure_pursuit` | `TargetCourse`, `pure_pursuit_steer_control`, `proportional_control` and a `simulate` loop |
| `motionkit.stanley` | `calc_target_index`, `stanley_control` and a `simulate` loop |
| `motionkit.lqr_cartesian` | `solve_dare`, `LQRController` (steering and acceleration), `calc_speed_profile`, `calc_nearest_index` |
| `motionkit.lqr_frenet` | `TrajectoryAnalyzer`, lateral `LatController` (LQR) and longitudinal `LonController` (proportional) |
| `motionkit.ekf_localization` | extended Kalman filter step `ekf_estimation`, motion and observation models, `covariance_ellipse`, and a `simulate` run with noisy GPS |
| `motionkit.lattice_planner` | `LatticePath`, `sampling_paths`, `sampling_paths_for_stopping`, `extract_optimal_path`, `lattice_planner`, `lattice_planner_for_stopping` |
| `motionkit.simulator` | `VehicleSimulator` box vehicles and a noisy `LidarSimulator` with ray-casting filter |
| `motionkit.rectangle_fitting` | `LShapeFitting` (segmentation and L-shape fitting with area, closeness or variance `Criteria`) and `RectangleData` |
| `motionkit.dynamic_window` | `Config`, `RobotType` and `dwa_control` for the dynamic window approach |
| `motionkit.potential_field` | `calc_potential_field` and `potential_field_planning` with oscillation detection |

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

Each of these commands runs a simulation and shows it in a Matplotlib
window:

```
motionkit-pure-pursuit
motionkit-ekf
motionkit-rectangle-fitting
motionkit-dwa
motionkit-potential-field
```

All of them accept `--no-plot` to run without a window. In addition:

- `motionkit-ekf` and `motionkit-rectangle-fitting` take `--seed N` for a
  repeatable random run;
- `motionkit-rectangle-fitting` takes `--sim-time SECONDS`;
- `motionkit-dwa` takes `--max-steps N`; without it the robot drives until it
  reaches the goal.

`motionkit-pure-pursuit` and `motionkit-potential-field` also print how long
the computation took.

## Using the library

Driving the vehicle model and evaluating a polynomial:

```python
from motionkit.vehicle import VehicleConfig, VehicleState
from motionkit.polynomials import QuinticPolynomial

config = VehicleConfig.scaled(0.5)
state = VehicleState(config)
state.update(1.0, 0.1, 0.1)
print(state.x, state.y, state.yaw, state.v)

lateral = QuinticPolynomial(0.0, 0.0, 0.0, 3.0, 0.0, 0.0, 5.0)
print(lateral.calc_point(2.5), lateral.calc_first_derivative(2.5))
```

Planning over a potential field (the result is `[xs, ys]`):

```python
from motionkit.potential_field import potential_field_planning

obstacles = [[15.0, 5.0, 20.0, 25.0], [25.0, 15.0, 26.0, 25.0]]
xs, ys = potential_field_planning((0.0, 10.0), (30.0, 30.0), obstacles, 0.5, 5.0)
```

Fitting rectangles to simulated lidar returns:

```python
import math
import numpy as np
from motionkit.simulator import VehicleSimulator, LidarSimulator
from motionkit.rectangle_fitting import LShapeFitting

car = VehicleSimulator(-10.0, 0.0, math.pi / 2, 0.0, 50.0 / 3.6, 3.0, 5.0)
lidar = LidarSimulator(rng=np.random.default_rng(0))
points = lidar.get_observation_points([car], math.radians(3.0))
rects, clusters = LShapeFitting().fitting(points)
for rect in rects:
    rect.calc_rect_contour()
    print(rect.rect_c_x, rect.rect_c_y)
```

Choosing a control with the dynamic window approach:

```python
from motionkit.dynamic_window import Config, dwa_control, motion

config = Config()
x = (0.0, 0.0, 0.0, 0.0, 0.0)
(v, w), predicted = dwa_control(x, config, (10.0, 10.0), [(5.0, 5.0)])
x = motion(x, v, w, config.dt)
```

Angles are in radians, distances in metres and speeds in metres per second
throughout.

## What it does not do

- There is no spline or course generator. The Stanley, LQR and pure pursuit
  controllers take course points (x, y and, where needed, yaw and curvature)
  that the caller supplies, and the lattice planner takes any reference
  object with an arc-length list `s` and `calc_position(s)` and `calc_yaw(s)`
  methods.
- There are no global grid or sampling planners and no model predictive
  controller.
- The Stanley, LQR and lattice modules have no command of their own; they are
  used from Python.