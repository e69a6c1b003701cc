import yaml
from meshinstall.CONVERTERS.to_yaml import ManifestYamlConverter
from meshinstall.MODELS.stage_context import StageContext
from meshinstall.RUNNERS.manifest_pipeline import build_statefulset


def test_render():
    manifest = build_statefulset(StageContext(namespace="mesh"))
    text = ManifestYamlConverter(manifest).render()
    assert text.startswith("apiVersion: apps/v1\nkind: StatefulSet\n")

    data = yaml.safe_load(text)
    assert data == manifest.to_dict()
    container = data["spec"]["template"]["spec"]["containers"][0]
    assert container["imagePullPolicy"] == "IfNotPresent"
    assert container["resources"]["limits"] == {"cpu": "1000m", "memory": "2Gi"}
    assert "readinessProbe" not in container


def test_convert(tmp_path):
    manifest = build_statefulset(StageContext())
    path = ManifestYamlConverter(manifest).convert(str(tmp_path / "out"))
    assert path.endswith("easemesh-control-plane.yaml")
    with open(path) as f:
        assert yaml.safe_load(f)["metadata"]["name"] == "easemesh-control-plane"
