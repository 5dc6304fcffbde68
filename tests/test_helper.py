"""Tests for ModuleInstallHelper orchestration."""

import contextlib
import json
from unittest.mock import Mock

import pytest

from module_install_helper.config import HelperConfig
from module_install_helper.errors import (
    InvalidDependency,
    MetadataNotFound,
    NoMatchingVersion,
    UnsupportedDependencyType,
)
from module_install_helper.framework import HostFramework
from module_install_helper.helper import ModuleInstallHelper
from module_install_helper.planning.models import MetadataDependency
from module_install_helper.versioning.models import Release

STDLIB_RELEASES = [Release(v) for v in ["4.15.0", "4.14.0", "4.13.1", "4.12.0"]]
CONCAT_RELEASES = [Release(v) for v in ["2.2.1", "2.2.0", "2.1.0", "2.0.0", "1.2.5"]]


class RecordingFramework(HostFramework):
    """Host framework double that records every call."""

    def __init__(self, facts=None):
        self.calls = []
        self.facts = facts or {}

    def lookup_fact(self, host, fact_name):
        self.calls.append(("lookup_fact", host["name"], fact_name))
        return self.facts.get(host["name"], {}).get(fact_name)

    def install_package(self, host, package_name):
        self.calls.append(("install_package", host["name"], package_name))
        return True

    def install_module_via_pmt_on(self, host, dependency):
        self.calls.append(("install_module_via_pmt_on", host["name"], dependency))
        return True

    def copy_module_to(self, host, **opts):
        self.calls.append(("copy_module_to", host["name"], opts))
        return True

    @contextlib.contextmanager
    def forge_stubbed_on(self, host, forge_host):
        self.calls.append(("stub_begin", host["name"], forge_host))
        yield
        self.calls.append(("stub_end", host["name"], forge_host))


def _write_metadata(directory, data):
    (directory / "metadata.json").write_text(json.dumps(data))
    return str(directory)


@pytest.fixture
def registry():
    reg = Mock()
    reg.query_registry.side_effect = lambda name: {
        "puppetlabs-stdlib": STDLIB_RELEASES,
        "puppetlabs-concat": CONCAT_RELEASES,
    }[name]
    return reg


@pytest.fixture
def framework():
    return RecordingFramework()


def _helper(framework, registry, source_dir=None, **config):
    return ModuleInstallHelper(
        framework, HelperConfig(module_source_dir=source_dir, **config), registry=registry
    )


A_HOST = {"name": "a_host", "roles": ["agent"]}
MASTER = {"name": "master", "roles": ["master", "database"]}


class TestModuleMetadata:

    def test_name_from_metadata(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, _write_metadata(tmp_path, {"name": "puppetlabs-vcsrepo"}))
        assert helper.module_name_from_metadata() == "vcsrepo"

    def test_metadata_read_once(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, _write_metadata(tmp_path, {"name": "puppetlabs-vcsrepo"}))
        first = helper.module_metadata()
        (tmp_path / "metadata.json").write_text(json.dumps({"name": "puppetlabs-other"}))
        assert helper.module_metadata() is first

    def test_missing_metadata(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, str(tmp_path))
        with pytest.raises(MetadataNotFound):
            helper.module_metadata()


class TestModuleDependenciesFromMetadata:

    def test_with_versions(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, _write_metadata(tmp_path, {
            "name": "puppetlabs-vcsrepo",
            "dependencies": [
                {"name": "puppetlabs/stdlib", "version_requirement": ">= 4.13.1 <= 4.14.0"},
                {"name": "puppetlabs/concat", "version_requirement": ">= 2.0.0 <= 2.2.0"},
            ],
        }))

        deps = helper.module_dependencies_from_metadata()

        assert [d.as_dict() for d in deps] == [
            {"module_name": "puppetlabs-stdlib", "version": "4.14.0"},
            {"module_name": "puppetlabs-concat", "version": "2.2.0"},
        ]

    def test_without_versions(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, _write_metadata(tmp_path, {
            "name": "puppetlabs-vcsrepo",
            "dependencies": [{"name": "puppetlabs/stdlib"}, {"name": "puppetlabs/concat"}],
        }))

        deps = helper.module_dependencies_from_metadata()

        assert deps == [MetadataDependency("puppetlabs-stdlib"), MetadataDependency("puppetlabs-concat")]
        registry.query_registry.assert_not_called()

    @pytest.mark.parametrize("data", [
        {"name": "puppetlabs-vcsrepo", "dependencies": []},
        {"name": "puppetlabs-vcsrepo"},
    ])
    def test_no_dependencies(self, tmp_path, framework, registry, data):
        helper = _helper(framework, registry, _write_metadata(tmp_path, data))
        assert helper.module_dependencies_from_metadata() == []


class TestInstallModuleOn:

    def test_copies_module(self, tmp_path, framework, registry):
        source = _write_metadata(tmp_path, {"name": "puppetlabs-vcsrepo"})
        helper = _helper(framework, registry, source)

        assert helper.install_module_on(MASTER) is True
        assert framework.calls == [
            ("copy_module_to", "master", {"source": source, "module_name": "vcsrepo"}),
        ]

    def test_passes_options(self, tmp_path, framework, registry):
        source = _write_metadata(tmp_path, {"name": "puppetlabs-vcsrepo"})
        helper = _helper(framework, registry, source)

        helper.install_module_on(MASTER, protocol="rsync")

        assert framework.calls[0][2] == {"source": source, "module_name": "vcsrepo", "protocol": "rsync"}

    def test_install_module_targets_master(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, _write_metadata(tmp_path, {"name": "puppetlabs-vcsrepo"}))

        helper.install_module([A_HOST, MASTER])

        assert [c[1] for c in framework.calls] == ["master"]

    def test_multiple_hosts_return_list(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, _write_metadata(tmp_path, {"name": "puppetlabs-vcsrepo"}))
        assert helper.install_module_on([A_HOST, MASTER]) == [True, True]


class TestInstallModuleDependenciesOn:

    def test_one_dependency_with_version(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, _write_metadata(tmp_path, {
            "name": "puppetlabs-vcsrepo",
            "dependencies": [{"name": "puppetlabs/stdlib", "version_requirement": ">= 4.13.1 <= 4.14.0"}],
        }))

        helper.install_module_dependencies_on(A_HOST)

        assert framework.calls == [
            ("install_module_via_pmt_on", "a_host", {"module_name": "puppetlabs-stdlib", "version": "4.14.0"}),
        ]

    def test_two_dependencies_without_version(self, tmp_path, framework, registry):
        helper = _helper(framework, registry, _write_metadata(tmp_path, {
            "name": "puppetlabs-vcsrepo",
            "dependencies": [{"name": "puppetlabs/stdlib"}, {"name": "puppetlabs/concat"}],
        }))

        helper.install_module_dependencies_on(A_HOST)

        installed = [c[2] for c in framework.calls]
        assert {"module_name": "puppetlabs-stdlib"} in installed
        assert {"module_name": "puppetlabs-concat"} in installed
        assert len(installed) == 2

    def test_explicit_dependencies_on_each_host(self, framework, registry):
        helper = _helper(framework, registry)
        deps = [MetadataDependency("puppetlabs-stdlib", "4.14.0"), MetadataDependency("puppetlabs-concat")]

        helper.install_module_dependencies_on([A_HOST, MASTER], deps)

        assert [(c[1], c[2]["module_name"]) for c in framework.calls] == [
            ("a_host", "puppetlabs-stdlib"),
            ("a_host", "puppetlabs-concat"),
            ("master", "puppetlabs-stdlib"),
            ("master", "puppetlabs-concat"),
        ]

    def test_stubbed_forge_wraps_each_install(self, framework, registry):
        helper = _helper(framework, registry, forge_host="http://forge.local/", stub_forge=True)

        helper.install_module_dependencies_on(A_HOST, [MetadataDependency("puppetlabs-stdlib")])

        assert framework.calls == [
            ("stub_begin", "a_host", "http://forge.local/"),
            ("install_module_via_pmt_on", "a_host", {"module_name": "puppetlabs-stdlib"}),
            ("stub_end", "a_host", "http://forge.local/"),
        ]

    def test_install_module_dependencies_selects_hosts(self, framework, registry):
        helper = _helper(framework, registry)

        helper.install_module_dependencies([A_HOST, MASTER], [MetadataDependency("puppetlabs-concat")])

        assert [c[1] for c in framework.calls] == ["master"]


class TestInstallModuleFromForgeOn:

    def test_resolves_and_installs(self, framework, registry):
        helper = _helper(framework, registry)

        helper.install_module_from_forge_on(A_HOST, "puppetlabs/stdlib", ">= 4.13.1 <= 4.14.0")

        assert framework.calls == [
            ("install_module_via_pmt_on", "a_host", {"module_name": "puppetlabs-stdlib", "version": "4.14.0"}),
        ]
        registry.query_registry.assert_called_once_with("puppetlabs-stdlib")

    def test_unresolvable_installs_nothing(self, framework, registry):
        helper = _helper(framework, registry)

        with pytest.raises(NoMatchingVersion):
            helper.install_module_from_forge_on(A_HOST, "puppetlabs-stdlib", "> 5.0.0")
        assert framework.calls == []

    def test_install_module_from_forge_selects_hosts(self, framework, registry):
        helper = _helper(framework, registry)

        helper.install_module_from_forge([A_HOST, MASTER], "puppetlabs-concat", "= 2.1.0")

        assert framework.calls == [
            ("install_module_via_pmt_on", "master", {"module_name": "puppetlabs-concat", "version": "2.1.0"}),
        ]


class TestInstallDependenciesOn:

    def test_installs_matching_pairs_in_plan_order(self, registry):
        framework = RecordingFramework(facts={
            "el7": {"osfamily": "RedHat"},
            "deb10": {"osfamily": "Debian"},
        })
        helper = _helper(framework, registry)
        hosts = [{"name": "el7"}, {"name": "deb10"}]
        deps = [
            {"name": "git", "type": "package"},
            {"name": "yum-utils", "type": "package",
             "facts": [{"name": "osfamily", "operator": "equal", "value": "RedHat"}]},
        ]

        plan = helper.install_dependencies_on(hosts, deps)

        installs = [c for c in framework.calls if c[0] == "install_package"]
        assert installs == [
            ("install_package", "el7", "git"),
            ("install_package", "el7", "yum-utils"),
            ("install_package", "deb10", "git"),
        ]
        assert [(h["name"], d.name) for h, d in plan] == [("el7", "git"), ("el7", "yum-utils"), ("deb10", "git")]

    def test_unsupported_type_fails_before_installing(self, framework, registry):
        helper = _helper(framework, registry)
        deps = [{"name": "git", "type": "package"}, {"name": "rake", "type": "gem"}]

        with pytest.raises(UnsupportedDependencyType) as exc_info:
            helper.install_dependencies_on([A_HOST], deps)

        assert exc_info.value.dependency_type == "gem"
        assert framework.calls == []

    def test_missing_type_is_invalid(self, framework, registry):
        helper = _helper(framework, registry)

        with pytest.raises(InvalidDependency):
            helper.install_dependencies_on([A_HOST], [{"name": "git"}])

    def test_failure_keeps_earlier_installs(self, registry):
        framework = RecordingFramework()
        calls = []

        def flaky_install(host, package_name):
            calls.append(package_name)
            if package_name == "broken":
                raise RuntimeError("package manager failed")
            return True

        framework.install_package = flaky_install
        helper = _helper(framework, registry)

        with pytest.raises(RuntimeError):
            helper.install_dependencies_on(
                [A_HOST],
                [{"name": "git", "type": "package"}, {"name": "broken", "type": "package"},
                 {"name": "curl", "type": "package"}],
            )

        assert calls == ["git", "broken"]
