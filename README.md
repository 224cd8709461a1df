# dcsim

Building blocks for a Monte Carlo simulation of a double crystal X-ray
spectrometer (DCS): ray geometry on the two crystals, cubic splines, Voigt
line shapes, a Levenberg–Marquardt fitter, a complete angular scan with a
simple (point or uniform) source, and the fixed geometry of a scan with an
extended source.

The package is a library; it has no command-line entry point and no
dependencies outside the standard library.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `dcsim.settings` – the configuration as dataclasses, gathered in
  `SimulationConfig` (`GeoParameters`, `GeoLengthElements`, `GeoPathLengths`,
  `UserSettings`, `PlotParameters`, `NumberRays`, `TemperatureParameters`,
  `FullEnergySpectrum`, `CurvedCrystal`, …), the record types `Pick`,
  `EnergyGen`, `EnergyCarac`, `PlotResponse`, `PlotPoint`, the physical
  constants, and the source kinds in `SourceType` (`"P"`, `"U"`, `"UC"`,
  `"UR"`, `"G"`). `parse_source_type` turns a short code into a `SourceType`
  and raises `ValueError` on anything else.
- `dcsim.geometry` – `reflect` (specular reflection on a crystal plane,
  returning a `Reflection` with the glancing angle and the reflected
  direction), the first and second crystal angle approximations,
  `reaches_detector`, `project_yz`, `lattice_at_temperature`, `find_index`
  and the Gaussian sampler `box_muller`.
- `dcsim.spline` – `spline_second_derivatives` and `splint`. A boundary slope
  above `0.99e30` gives a natural end.
- `dcsim.voigt` – the complex error function `faddeeva(xw, yw)` and the line
  shapes `true_voigt(x, a)` (parameters `[gauss_width, (amplitude,
  lorentz_width, position) * k, background]`) and `pseudo_voigt(x, a)`
  (parameters `[width, amplitude, lorentz_fraction, position, background]`).
  Both return the value and the list of derivatives by parameter.
- `dcsim.levmar` – `gauss_jordan`, `sort_covariance`, `mrq_coefficients` and
  `MarquardtFitter`, whose `step()` tries one damped update and returns the
  chi-square, and whose `finish()` returns the covariance of all parameters
  (zero rows and columns for fixed ones).
- `dcsim.simple_source` – `SimpleSourceSimulation`, which rotates the second
  crystal through the window from `maxi_angl` down to `mini_angl` and returns
  one `ProfileBin` per angle (`nubins + 1` of them) with the parallel and
  antiparallel counts. The models it needs are supplied as an object that
  follows the `CrystalPhysics` protocol: `misalign`, `horizontal_limits`,
  `energy` and `reflection`.
- `dcsim.complex_geometry` – `build_geometry`, which works out everything
  that stays fixed during a scan with an extended source (temperature
  corrected lattice spacings, divergence limits, the aperture, detector and
  crystal windows, crystal normals, wavelength range) as a `ComplexGeometry`;
  and `crystal_windows`, which gives the masked acceptance windows of both
  crystals as `CrystalWindow` objects with a `contains(y, z)` test.

## Example

```python
import math
import random

from dcsim.geometry import reflect, lattice_at_temperature
from dcsim.spline import spline_second_derivatives, splint
from dcsim.voigt import pseudo_voigt

hit = reflect(1.0, 0.0, 0.0, -0.7071, 0.7071, 0.0)
print(hit.angle, hit.rx, hit.ry, hit.rz)

d = lattice_at_temperature(3.1355, 22.5)

xs = [0.0, 1.0, 2.0, 3.0]
ys = [0.0, 1.0, 4.0, 9.0]
y2 = spline_second_derivatives(xs, ys, 1e31, 1e31)
print(splint(xs, ys, y2, 1.5))

value, derivatives = pseudo_voigt(0.1, [0.5, 100.0, 0.3, 0.0, 10.0])
```

A simple-source scan takes a `SimulationConfig`, a physics object and a
`random.Random`, so runs can be reproduced by seeding the generator:

```python
from dcsim.settings import SimulationConfig
from dcsim.simple_source import SimpleSourceSimulation


class FlatPhysics:
    def __init__(self, rng):
        self.rng = rng

    def misalign(self, dis_total):
        return 0.0, 0.0, 1.0, -1.0

    def horizontal_limits(self, tetaref, delrot_min, delrot_max, fi_max, teta_max, teta_min):
        return teta_min, teta_min

    def energy(self, a_lamds_uni, b_lamds_uni, tw_d):
        return a_lamds_uni + b_lamds_uni * self.rng.random()

    def reflection(self, angle, tetabra, lamda, second_crystal, poli_p):
        return abs(angle - tetabra) < 1e-3


rng = random.Random(1)
config = SimulationConfig()
# fill in config.path_lengths, config.length_elements, config.plot_parameters,
# config.number_rays and config.user for the instrument at hand

sim = SimpleSourceSimulation(
    config, FlatPhysics(rng), math.radians(14.2), -0.5, 0.5, 3.1355, rng
)
for profile_bin in sim.run():
    print(profile_bin.angle_para, profile_bin.counts_para, profile_bin.error_para)
```

## What the package does not do

- It does not trace rays for an extended source: `dcsim.complex_geometry`
  prepares the fixed geometry of such a scan, but no simulation loop over
  rays, rotations and bins for point, uniform circular, uniform rectangular
  or Gaussian sources is included.
- It carries no crystal reflectivity curves, energy spectra, misalignment or
  divergence models; the simple-source scan takes them from the object you
  pass in.
- It reads no input files, writes no profile or histogram files, and draws no
  plots or image plates; results come back as Python objects.