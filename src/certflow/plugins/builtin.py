"""Built-in plugin descriptors.

These are the compiled-in plugins the resolver's defaults refer to.  The
factories only report capabilities; the work each plugin performs
(reading IIS bindings, answering challenges, writing PEM files...)
lives outside this package.

Each entry in ``BUILTIN_PLUGINS`` is a :class:`PluginDescriptor`.  The
``*_RUNNER`` constants name the runners the resolvers use as defaults
and fallbacks.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from certflow.core.steps import (
    DNS01_CHALLENGE_TYPE,
    HTTP01_CHALLENGE_TYPE,
    TLSALPN01_CHALLENGE_TYPE,
    Step,
)
from certflow.plugins.base import NullPluginFactory, PluginFactory
from certflow.plugins.context import host_environment
from certflow.plugins.descriptor import PluginDescriptor

if TYPE_CHECKING:
    from certflow.core.target import Target

TARGET_IIS = "target.iis"
TARGET_MANUAL = "target.manual"
TARGET_CSR = "target.csr"

VALIDATION_SELFHOSTING = "validation.selfhosting.http-01"
VALIDATION_FILESYSTEM = "validation.filesystem.http-01"
VALIDATION_SFTP = "validation.sftp.http-01"
VALIDATION_MANUAL_DNS = "validation.manual.dns-01"
VALIDATION_SCRIPT_DNS = "validation.script.dns-01"
VALIDATION_SELFHOSTING_TLS = "validation.selfhosting.tls-alpn-01"

ORDER_SINGLE = "order.single"
ORDER_HOST = "order.host"
ORDER_DOMAIN = "order.domain"

CSR_RSA = "csr.rsa"
CSR_EC = "csr.ec"

STORE_CERTIFICATESTORE = "store.certificatestore"
STORE_PEMFILES = "store.pemfiles"
STORE_PFXFILE = "store.pfxfile"
STORE_NONE = "store.none"

INSTALLATION_IIS = "installation.iis"
INSTALLATION_SCRIPT = "installation.script"
INSTALLATION_NONE = "installation.none"


# ---------------------------------------------------------------------------
# Shared capability checks
# ---------------------------------------------------------------------------


class _AdminFactory(PluginFactory):
    """Factory for plugins that need administrator rights."""

    def disabled(self) -> tuple[bool, str | None]:
        if not host_environment(self.scope).admin:
            return True, "Run as administrator to allow use of this plugin."
        return False, None


class _IisFactory(PluginFactory):
    """Factory for plugins that talk to a local IIS installation."""

    def disabled(self) -> tuple[bool, str | None]:
        environment = host_environment(self.scope)
        if not environment.iis_available:
            return True, "No supported version of IIS detected."
        if not environment.admin:
            return True, "Run as administrator to allow access to IIS."
        return False, None


class _HttpValidationFactory(PluginFactory):
    def can_validate(self, target: "Target") -> bool:
        return not target.has_wildcard


class _SplitOrderFactory(PluginFactory):
    def can_process(self, target: "Target") -> bool:
        return len(target.identifiers) > 1


# ---------------------------------------------------------------------------
# Target
# ---------------------------------------------------------------------------


class IisTargetFactory(_IisFactory):
    order = 0


class ManualTargetFactory(PluginFactory):
    order = 5


class CsrTargetFactory(PluginFactory):
    order = 10


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class SelfHostingFactory(_HttpValidationFactory, _AdminFactory):
    order = 1


class FileSystemFactory(_HttpValidationFactory):
    order = 2


class SftpFactory(_HttpValidationFactory):
    order = 3


class ManualDnsFactory(PluginFactory):
    order = 1


class ScriptDnsFactory(PluginFactory):
    order = 2


class TlsSelfHostingFactory(_HttpValidationFactory, _AdminFactory):
    order = 1


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------


class SingleOrderFactory(PluginFactory):
    order = 0


class HostOrderFactory(_SplitOrderFactory):
    order = 1


class DomainOrderFactory(_SplitOrderFactory):
    order = 2


# ---------------------------------------------------------------------------
# Csr
# ---------------------------------------------------------------------------


class RsaFactory(PluginFactory):
    order = 0


class EcFactory(PluginFactory):
    order = 1


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class CertificateStoreFactory(_AdminFactory):
    order = 0


class PemFilesFactory(PluginFactory):
    order = 2


class PfxFileFactory(PluginFactory):
    order = 3


class NullStoreFactory(NullPluginFactory):
    pass


# ---------------------------------------------------------------------------
# Installation
# ---------------------------------------------------------------------------


class IisInstallationFactory(_IisFactory):
    order = 5

    def can_install(
        self,
        store_runners: Iterable[str],
        installation_runners: Iterable[str],
    ) -> tuple[bool, str | None]:
        if STORE_CERTIFICATESTORE not in store_runners:
            return False, "Requires the certificate to be stored in the Windows Certificate Store."
        if INSTALLATION_IIS in installation_runners:
            return False, "Already chosen."
        return True, None


class ScriptInstallationFactory(PluginFactory):
    order = 10


class NullInstallationFactory(NullPluginFactory):
    pass


BUILTIN_PLUGINS: tuple[PluginDescriptor, ...] = (
    PluginDescriptor("iis", TARGET_IIS, Step.TARGET,
                     "Read bindings from IIS", IisTargetFactory),
    PluginDescriptor("manual", TARGET_MANUAL, Step.TARGET,
                     "Manual input", ManualTargetFactory),
    PluginDescriptor("csr", TARGET_CSR, Step.TARGET,
                     "CSR created by another program", CsrTargetFactory, hidden=True),
    PluginDescriptor("selfhosting", VALIDATION_SELFHOSTING, Step.VALIDATION,
                     "Serve verification files from memory", SelfHostingFactory,
                     challenge_type=HTTP01_CHALLENGE_TYPE),
    PluginDescriptor("filesystem", VALIDATION_FILESYSTEM, Step.VALIDATION,
                     "Save verification files on (network) path", FileSystemFactory,
                     challenge_type=HTTP01_CHALLENGE_TYPE),
    PluginDescriptor("sftp", VALIDATION_SFTP, Step.VALIDATION,
                     "Upload verification files via SSH-FTP", SftpFactory,
                     challenge_type=HTTP01_CHALLENGE_TYPE),
    PluginDescriptor("manual", VALIDATION_MANUAL_DNS, Step.VALIDATION,
                     "Create verification records manually (auto-renew not possible)",
                     ManualDnsFactory, challenge_type=DNS01_CHALLENGE_TYPE),
    PluginDescriptor("script", VALIDATION_SCRIPT_DNS, Step.VALIDATION,
                     "Create verification records with your own script", ScriptDnsFactory,
                     challenge_type=DNS01_CHALLENGE_TYPE),
    PluginDescriptor("selfhosting", VALIDATION_SELFHOSTING_TLS, Step.VALIDATION,
                     "Answer TLS verification request from certflow", TlsSelfHostingFactory,
                     challenge_type=TLSALPN01_CHALLENGE_TYPE),
    PluginDescriptor("single", ORDER_SINGLE, Step.ORDER,
                     "Single certificate", SingleOrderFactory),
    PluginDescriptor("host", ORDER_HOST, Step.ORDER,
                     "Separate certificate for each host (e.g. sub.example.com)",
                     HostOrderFactory),
    PluginDescriptor("domain", ORDER_DOMAIN, Step.ORDER,
                     "Separate certificate for each domain (e.g. *.example.com)",
                     DomainOrderFactory),
    PluginDescriptor("rsa", CSR_RSA, Step.CSR, "RSA key", RsaFactory),
    PluginDescriptor("ec", CSR_EC, Step.CSR, "Elliptic Curve key", EcFactory),
    PluginDescriptor("certificatestore", STORE_CERTIFICATESTORE, Step.STORE,
                     "Windows Certificate Store (Local Computer)", CertificateStoreFactory),
    PluginDescriptor("pemfiles", STORE_PEMFILES, Step.STORE,
                     "PEM encoded files (Apache, nginx, etc.)", PemFilesFactory),
    PluginDescriptor("pfxfile", STORE_PFXFILE, Step.STORE,
                     "PFX archive", PfxFileFactory),
    PluginDescriptor("none", STORE_NONE, Step.STORE,
                     "No (additional) store steps", NullStoreFactory),
    PluginDescriptor("iis", INSTALLATION_IIS, Step.INSTALLATION,
                     "Create or update bindings in IIS", IisInstallationFactory),
    PluginDescriptor("script", INSTALLATION_SCRIPT, Step.INSTALLATION,
                     "Start external script or program", ScriptInstallationFactory),
    PluginDescriptor("none", INSTALLATION_NONE, Step.INSTALLATION,
                     "No (additional) installation steps", NullInstallationFactory),
)
