"""
Unit tests for Spring demo stage scanning.
"""

import pytest

from conftest import write_files
from curriculum_toolkit.extractor.demos import scan_demo_stage
from curriculum_toolkit.extractor.markdown import ParseError

GATEWAY_JAVA = """\
package com.example.gateway;

@SpringBootApplication
@EnableDiscoveryClient
public class GatewayApplication {
    public static void main(String[] args) {
        log.info("Gateway listening on port 8080");
    }
}
"""

ORDERS_JAVA = """\
package com.example.orders;

public class OrdersService {
    // no entry point yet
}
"""


@pytest.fixture
def microservices(tmp_path):
    stage = "resources/demo/spring/stage-9-microservices"
    write_files(tmp_path, {
        f"{stage}/gateway/pom.xml": "<project/>",
        f"{stage}/gateway/src/main/java/GatewayApplication.java": GATEWAY_JAVA,
        f"{stage}/gateway/src/test/java/GatewayApplicationTest.java": "class GatewayApplicationTest {}",
        f"{stage}/orders/build.gradle": "plugins {}",
        f"{stage}/orders/src/main/java/OrdersService.java": ORDERS_JAVA,
        f"{stage}/orders/src/main/resources/application.yml": "server:\n  port: 8082\n",
        f"{stage}/orders/target/classes/Stale.java": "@SpringBootApplication class Stale {}",
        f"{stage}/docs/notes.txt": "not a service",
    })
    return tmp_path, tmp_path / stage


class TestScanDemoStage:

    def test_single_service_stage(self, sample_corpus):
        stage_dir = sample_corpus / "resources/demo/spring/stage-1-hello"
        stage = scan_demo_stage(stage_dir, sample_corpus)

        assert (stage.name, stage.number, stage.slug) == ("stage-1-hello", 1, "hello")
        assert stage.path == "resources/demo/spring/stage-1-hello"
        assert stage.services == ("stage-1-hello",)
        assert stage.entrypoints == {"stage-1-hello": ("HelloApplication",)}
        assert stage.test_classes == {"stage-1-hello": ("HelloApplicationTests",)}
        assert stage.ports == {"stage-1-hello": (8080,)}

    def test_multi_service_stage(self, microservices):
        root, stage_dir = microservices
        stage = scan_demo_stage(stage_dir, root)

        assert stage.services == ("gateway", "orders")
        assert stage.entrypoints == {"gateway": ("GatewayApplication",), "orders": ()}
        assert stage.test_classes["gateway"] == ("GatewayApplicationTest",)
        assert stage.ports == {"gateway": (8080,), "orders": (8082,)}

    def test_build_output_ignored(self, microservices):
        """Compiled copies under target/ are not scanned."""
        root, stage_dir = microservices
        stage = scan_demo_stage(stage_dir, root)
        assert "Stale" not in stage.entrypoints["orders"]

    def test_not_a_stage_directory(self, tmp_path):
        other = tmp_path / "samples"
        other.mkdir()
        with pytest.raises(ValueError, match="Not a demo stage"):
            scan_demo_stage(other, tmp_path)

    def test_unreadable_source_raises_parse_error(self, tmp_path):
        stage_dir = tmp_path / "stage-2-broken"
        (stage_dir / "src").mkdir(parents=True)
        (stage_dir / "src" / "Bad.java").write_bytes(b"class Bad { \xff }")
        with pytest.raises(ParseError):
            scan_demo_stage(stage_dir, tmp_path)
