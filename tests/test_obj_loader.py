import pytest

from ppgso.mtl import load_mtl
from ppgso.obj_loader import (
    MeshData,
    ObjLoadError,
    Shape,
    VertexIndex,
    fix_index,
    load_obj,
    load_obj_stream,
    parse_triple,
)

TRIANGLE = ["v 0.5 1.0 -1.0", "v 2.0 0.25 0.0", "v -0.5 -2.0 4.0", "f 1 2 3"]


def _reader(libraries):
    def read(mat_id):
        return load_mtl(libraries.get(mat_id, []))

    return read


def test_fix_index_one_based_and_relative():
    assert fix_index(1, 5) == 0
    assert fix_index(0, 5) == fix_index(1, 5)
    assert fix_index(-1, 5) == fix_index(5, 5)


def test_parse_triple_all_forms_agree_on_position():
    plain, rest_plain = parse_triple("4 x", 10, 10, 10)
    full, rest_full = parse_triple("4/5/6 x", 10, 10, 10)
    normal_only, _ = parse_triple("4//6", 10, 10, 10)
    tex_only, _ = parse_triple("4/5", 10, 10, 10)
    assert rest_plain == " x"
    assert rest_full == " x"
    assert plain == VertexIndex(fix_index(4, 10))
    assert full == VertexIndex(fix_index(4, 10), fix_index(5, 10), fix_index(6, 10))
    assert normal_only == VertexIndex(fix_index(4, 10), -1, fix_index(6, 10))
    assert tex_only == VertexIndex(fix_index(4, 10), fix_index(5, 10), -1)


def test_triangle_positions_follow_input():
    shapes, materials = load_obj_stream(TRIANGLE, _reader({}))
    assert len(shapes) == 1
    mesh = shapes[0].mesh
    assert mesh.positions == [0.5, 1.0, -1.0, 2.0, 0.25, 0.0, -0.5, -2.0, 4.0]
    assert sorted(mesh.indices) == list(range(len(mesh.positions) // 3))
    assert mesh.material_ids == [-1]
    assert mesh.normals == [] and mesh.texcoords == []
    assert materials == []


def test_polygon_is_fanned_into_triangles():
    lines = ["v 0 0 0", "v 1 0 0", "v 1 1 0", "v 0 1 0", "v 0 2 0", "f 1 2 3 4 5"]
    shapes, _ = load_obj_stream(lines, _reader({}))
    mesh = shapes[0].mesh
    triangles = [mesh.indices[i : i + 3] for i in range(0, len(mesh.indices), 3)]
    assert len(triangles) == 5 - 2
    assert len(mesh.material_ids) == len(triangles)
    assert {tri[0] for tri in triangles} == {mesh.indices[0]}
    assert len(mesh.positions) // 3 == 5


def test_shared_vertices_are_reused_within_a_shape():
    lines = ["v 0 0 0", "v 1 0 0", "v 1 1 0", "v 0 1 0", "f 1 2 3", "f 1 3 4"]
    shapes, _ = load_obj_stream(lines, _reader({}))
    mesh = shapes[0].mesh
    assert len(mesh.positions) // 3 == 4
    assert mesh.indices[0] == mesh.indices[3]
    assert mesh.indices[2] == mesh.indices[4]


def test_relative_indices_match_absolute():
    absolute, _ = load_obj_stream(TRIANGLE, _reader({}))
    relative, _ = load_obj_stream(TRIANGLE[:-1] + ["f -3 -2 -1"], _reader({}))
    assert relative == absolute


def test_normals_and_texcoords_follow_input():
    lines = [
        "v 0 0 0", "v 1 0 0", "v 0 1 0",
        "vt 0.25 0.75", "vt 0.5 0.5", "vt 1.0 0.0",
        "vn 0 0 1",
        "f 1/1/1 2/2/1 3/3/1",
    ]
    shapes, _ = load_obj_stream(lines, _reader({}))
    mesh = shapes[0].mesh
    assert mesh.texcoords == [0.25, 0.75, 0.5, 0.5, 1.0, 0.0]
    assert mesh.normals == [0.0, 0.0, 1.0] * 3


def test_groups_and_objects_name_shapes():
    lines = TRIANGLE[:-1] + ["g first extra", "f 1 2 3", "o second", "f 1 2 3", "g", "f 1 2 3"]
    shapes, _ = load_obj_stream(lines, _reader({}))
    assert [shape.name for shape in shapes] == ["first", "second", ""]
    assert all(shape.mesh == shapes[0].mesh for shape in shapes)


def test_usemtl_selects_material_and_splits_shapes():
    libraries = {"lib.mtl": ["newmtl red", "Kd 1 0 0", "newmtl blue", "Kd 0 0 1"]}
    lines = ["mtllib lib.mtl"] + TRIANGLE + ["usemtl blue", "f 3 2 1", "usemtl missing", "f 1 2 3"]
    shapes, materials = load_obj_stream(lines, _reader(libraries))
    names = [material.name for material in materials]
    assert names == ["red", "blue"]
    assert shapes[0].mesh.material_ids == [-1]
    assert shapes[1].mesh.material_ids == [names.index("blue")]
    assert shapes[2].mesh.material_ids == [-1]


def test_second_library_indices_are_offset():
    libraries = {"a.mtl": ["newmtl red"], "b.mtl": ["newmtl green"]}
    lines = ["mtllib a.mtl", "mtllib b.mtl"] + TRIANGLE[:-1] + ["usemtl green", "f 1 2 3"]
    shapes, materials = load_obj_stream(lines, _reader(libraries))
    material_id = shapes[0].mesh.material_ids[0]
    assert materials[material_id].name == "green"


def test_comments_blank_lines_and_crlf_are_ignored():
    plain, _ = load_obj_stream(TRIANGLE, _reader({}))
    noisy = ["# comment\r\n", "\r\n", "   \n"] + [line + "\r\n" for line in TRIANGLE]
    noisy_shapes, _ = load_obj_stream(noisy, _reader({}))
    assert noisy_shapes == plain


def test_missing_vertex_raises():
    with pytest.raises(ObjLoadError):
        load_obj_stream(["v 0 0 0", "f 1 2 3"], _reader({}))


def test_missing_file_raises(tmp_path):
    missing = tmp_path / "absent.obj"
    with pytest.raises(ObjLoadError, match="absent.obj"):
        load_obj(missing)


def test_load_obj_reads_materials_from_basepath(tmp_path):
    (tmp_path / "colors.mtl").write_text("newmtl gold\nKd 1 0.5 0\n")
    obj_path = tmp_path / "model.obj"
    obj_path.write_text("\n".join(["mtllib colors.mtl"] + TRIANGLE[:-1] + ["usemtl gold", "f 1 2 3"]) + "\n")
    shapes, materials = load_obj(obj_path, str(tmp_path) + "/")
    assert [material.name for material in materials] == ["gold"]
    assert materials[0].diffuse == (1.0, 0.5, 0.0)
    assert shapes == [Shape(name="", mesh=MeshData(
        positions=shapes[0].mesh.positions,
        indices=shapes[0].mesh.indices,
        material_ids=[0],
    ))]


def test_load_obj_matches_stream(tmp_path):
    obj_path = tmp_path / "tri.obj"
    obj_path.write_text("\n".join(TRIANGLE) + "\n")
    from_file, _ = load_obj(obj_path)
    from_lines, _ = load_obj_stream(TRIANGLE, _reader({}))
    assert from_file == from_lines