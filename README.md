# hedgebake

Building blocks for baking and packaging global illumination data for stages:
lightmap atlas packing, spherical Gaussian and light field probe accumulation,
scene effect parameters, and the naming and sizing rules used when loading and
saving stage resources.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `hedgebake.atlas`: `Texture`, `Atlas` and `create_atlases(textures)`. Textures
  are sorted by area and packed into a binary-split tree; each atlas starts at the
  smallest texture size and grows by doubling its shorter side until everything
  fits (or 2048, or the largest texture, is reached). Textures that do not fit go
  into further atlases. Positions are written into each `Texture`'s `x` and `y`.
- `hedgebake.property_bag`: `PropertyBag`, a store of numbers (kept as raw 8-byte
  slots, read and written as `bool`, `i8` … `u64`, `f32`, `f64`) and strings,
  keyed by `str_hash` (64-bit FNV-1a) or by integer. `read`/`write` work on binary
  streams; `load`/`save` on files, and `load` of a file that cannot be opened
  leaves the bag empty.
- `hedgebake.lightmap`: `level_size`, `he1_level_size` (never below 4 pixels),
  `merge_he1_lightmap` (puts a shadow map into the alpha channel of a BGRA light
  map held in numpy arrays), `lightmap_names`, and `he2_input_paths` /
  `he1_input_paths`, which find an instance's input files or log a warning and
  return `None`.
- `hedgebake.shader_source`: `ShaderStage`, `ShaderProgramInfo`, the built-in
  program table looked up by `program_info(name)`, and `build_shader_source`,
  which prefixes `#version 330` and `#define` lines to shader text.
- `hedgebake.archive_layout`: `assign_atlas_names` (`a0000`, `a0001`, …),
  `atlas_uv_entries` returning normalised `AtlasEntry` rectangles,
  `gia_archive_name`, `resources_archive_path`, `stage_add_pfd_path`,
  `gi_lim_payload`, `is_terrain_group_entry` and `goes_to_stage_archive`.
- `hedgebake.probes`: `SGGIPoint` (four spherical Gaussian lobes) and
  `SHLightFieldPoint` (six axes) with `add_sample` and `end`;
  `SHLightFieldPoint.texels` yields the RGBA texels a probe writes to its volume.
- `hedgebake.scene_effect`: `SceneEffect` holding `DefaultParams`, `HdrParams`
  and `LightScattering`. `load_xml` applies the values of a
  `SceneEffect.prm.xml` document; `LightScattering.compute` returns extinction
  and in-scattering for a point.
- `hedgebake.light_field`: `SHLightField` volumes with `rotation_matrix`,
  `set_from_rotation_matrix`, `matrix`, `probe_positions`, `snap_radius` and
  `clone`, plus `new_light_field_name` and `default_light_field`.
- `hedgebake.scene_factory`: `classify_shader` into `ShaderTraits` and
  `MaterialType`, `TextureSlots.assign`, `triangles_from_strip` for strips with
  `0xFFFF` restarts, and `create_light` building a `Light` of a `LightType`.
- `hedgebake.stage_loader`: `unleashed_archive_names`, `lost_world_sector_names`,
  `original_resolution`, `expand_atlas_resolutions`, `float_bitmap_format`,
  `preferred_mip_level` and `stage_name_from_path`.

## Example

```python
from hedgebake.atlas import Texture, create_atlases
from hedgebake.archive_layout import assign_atlas_names, atlas_uv_entries

textures = [Texture("a-level2", 64, 64), Texture("b-level2", 32, 32)]
atlases = create_atlases(textures)
print(assign_atlas_names(atlases, keep_single=False))
for atlas in atlases:
    print(atlas.name, atlas.width, atlas.height, atlas_uv_entries(atlas))
```

## What this package does not do

It has no command-line program and no viewer or editor window. It does not read
or write the game's archive, packed file or DDS texture formats, does not encode
or compress textures, and does not trace rays or run a bake; it supplies the
packing, accumulation, parameter and naming logic such a tool is built from.