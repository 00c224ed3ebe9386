"""CRD definitions for APISIX custom resources."""

from dataclasses import dataclass

APISIX_GROUP = "apisix.apache.org"

# Group versions served by the ApisixRoute CRD
APISIX_V2 = f"{APISIX_GROUP}/v2"
APISIX_V2BETA3 = f"{APISIX_GROUP}/v2beta3"
APISIX_V2BETA2 = f"{APISIX_GROUP}/v2beta2"


@dataclass(frozen=True)
class CRDDefinition:
    """One served version of a custom resource kind."""

    group: str
    version: str
    plural: str
    kind: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"


class ApisixCRDs:
    """ApisixRoute CRD definitions, one per served version."""

    APISIX_ROUTE_V2 = CRDDefinition(
        group=APISIX_GROUP,
        version="v2",
        plural="apisixroutes",
        kind="ApisixRoute",
    )

    APISIX_ROUTE_V2BETA3 = CRDDefinition(
        group=APISIX_GROUP,
        version="v2beta3",
        plural="apisixroutes",
        kind="ApisixRoute",
    )

    APISIX_ROUTE_V2BETA2 = CRDDefinition(
        group=APISIX_GROUP,
        version="v2beta2",
        plural="apisixroutes",
        kind="ApisixRoute",
    )

    # Newest first
    APISIX_ROUTES = (APISIX_ROUTE_V2, APISIX_ROUTE_V2BETA3, APISIX_ROUTE_V2BETA2)
