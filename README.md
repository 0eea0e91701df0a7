# mlxir

Offline processing for data from Melexis thermal infrared array sensors.

- For the MLX90641 (16×12 pixels), it decodes the EEPROM image and extracts
  the calibration parameters. From a frame it then computes the supply
  voltage, the ambient temperature and the per-pixel object temperatures.
- For 32×24 thermal images such as those of the MLX90640, it has an adaptive
  IIR smoothing filter and a chess-pattern de-interlacing filter.
- It has helpers for the `KEY=value` / `cs:` settings text used to configure a
  sensor.

The package uses only the standard library.

## What it does not do

The package does not talk to a sensor. It holds no I2C bus access, no device
driver and no measurement session. EEPROM dumps (832 words) and frames
(242 words for the MLX90641) must be read by your own code and passed in as
sequences of integers. It has no command-line program either.

## Modules

### `mlxir.mlx90641_eeprom`

- `hamming_decode(ee_data)` takes the 832 raw EEPROM words. It returns a
  tuple `(words, corrected)`:
  - Words from address 16 onwards have single-bit errors fixed and are reduced
    to their 11 data bits. The first 16 words are returned unchanged.
  - `corrected` lists the addresses that were repaired.

  A word with an uncorrectable error raises `EepromError` with `code == -10`.
  The decoded `words` and the failing `addresses` are available on the
  exception. A dump that is not 832 words long raises `ValueError`.
- `check_eeprom_valid(ee_data)` returns `True` when the device-select bit
  marks an MLX90641. Otherwise it raises `EepromError` with `code == -7`.

### `mlxir.mlx90641_params`

`extract_parameters(ee_data)` builds a `Params` dataclass from a decoded
EEPROM image. `Params` holds the Vdd, PTAT, gain, TGC, KsTa/KsTo, corner
temperatures, the per-pixel alpha/offset/kta/kv values with their scales, the
compensation-pixel data, the EEPROM emissivity and the broken pixel. The
broken pixel is `0xFFFF` when there is none.

It raises:

- `EepromError` with `code == -7` for a foreign EEPROM.
- `EepromError` with `code == -3` when more than one broken pixel is found.
  The extracted parameters are kept as `error.params`.
- `ValueError` for a wrong length or coefficients that cannot be normalised.

### `mlxir.mlx90641_calc`

These are pure functions on a 242-word frame and a `Params`:

- `get_vdd(frame, params)` gives the supply voltage in volts.
- `get_ta(frame, params)` gives the sensor ambient temperature in °C.
- `calculate_to(frame, params, emissivity, tr)` gives 192 object
  temperatures in °C. `tr` is the reflected temperature.
- `get_image(frame, params)` gives 192 uncalibrated values proportional to
  the IR signal of each pixel.
- `subpage_number(frame)` gives the subpage word of the frame.
- `bad_pixel_correction(pixel, to)` returns a copy of `to` with `pixel`
  rebuilt from its row neighbours. Out-of-range pixel numbers leave it
  unchanged.

### `mlxir.filters`

- `median(values)`: for an even number of values it returns the mean of the
  two middle ones.
- `seed_iir(values, fallback)` gives the initial filter state. Each value
  strictly between -100 and 1000 is kept; any other value is replaced by
  `fallback`.
- `iir_filter(values, state, depth=8, threshold=2.5)` returns the new state.
  - A step of at least `threshold` is followed by 90 % at once.
  - Smaller steps are averaged over `depth` frames.
  - Values outside -100…1000 leave their pixel's state untouched.
- `deinterlace_filter(values, subpage)` works on a 768-value (32×24) image.
  It replaces the pixels of one chess subpage by the median of their
  neighbourhood when they differ from it by more than 0.7.

### `mlxir.config`

- `c_atof(text)` and `c_atoi(text)` read a leading number the way C does,
  giving 0 when there is none.
- `parse_hex8(text)` reads `3A` or `0x3a`.
- `split_setting("EM=0.9")` returns `("EM", "0.9")`.
- `format_fixed(value, decimals)` formats with a fixed number of decimals.
- `config_line(address, key, value)` and `reply_line(address, message)`
  build the `cs:`/`+cs:` lines.
- `flag_list(flags, names)` renders a flag word with the names of the set
  flags.

```python
from mlxir.config import config_line, flag_list, reply_line

config_line(0x33, "EM", "0.950")  # 'cs:33:EM=0.950'
reply_line(0x33, "EM=OK")         # '+cs:33:EM=OK'
flag_list(3, {1: "CORRECT_BROKEN_PIXELS", 2: "IIR_FILTER"})
# '3(CORRECT_BROKEN_PIXELS,IIR_FILTER)'
```

## Example

```python
from mlxir.mlx90641_eeprom import hamming_decode
from mlxir.mlx90641_params import extract_parameters
from mlxir.mlx90641_calc import bad_pixel_correction, calculate_to, get_ta

words, corrected = hamming_decode(ee_words)      # 832 raw EEPROM words
params = extract_parameters(words)

ta = get_ta(frame_words, params)                 # 242 frame words
to = calculate_to(frame_words, params, 0.95, 25.0)
to = bad_pixel_correction(params.broken_pixel, to)
print(f"Ta = {ta:.2f} °C, hottest pixel = {max(to):.2f} °C")
```

## Running the tests

```
pip install -e ".[test]"
pytest
```