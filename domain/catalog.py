from __future__ import annotations

from dataclasses import dataclass

from domain.models import ConnectionStyle

ICON_ROOT = "img/lib/azure2"


@dataclass(frozen=True)
class ResourceDefinition:
    icon: str
    width: int
    height: int
    display_name: str
    category: str


@dataclass(frozen=True)
class ConnectionStyleConvention:
    style: str
    legend_label: str
    color: str
    dashed: bool


def _icon(category: str, file_name: str) -> str:
    return f"{ICON_ROOT}/{category}/{file_name}.svg"


def _define(
    category: str,
    file_name: str,
    display_name: str,
    width: int = 64,
    height: int = 64,
) -> ResourceDefinition:
    return ResourceDefinition(
        icon=_icon(category, file_name),
        width=width,
        height=height,
        display_name=display_name,
        category=category,
    )


RESOURCES: dict[str, ResourceDefinition] = {
    # compute
    "vm": _define("compute", "Virtual_Machine", "Virtual Machine"),
    "vmss": _define("compute", "VM_Scale_Sets", "VM Scale Set"),
    "aks": _define("compute", "Kubernetes_Services", "Azure Kubernetes Service", 64, 58),
    "appService": _define("compute", "App_Services", "App Service"),
    "appServicePlan": _define("compute", "App_Service_Plans", "App Service Plan"),
    "functionApp": _define("compute", "Function_Apps", "Function App", 64, 56),
    "containerApps": _define("other", "Worker_Container_App", "Container App", 64, 52),
    "containerInstances": _define("compute", "Container_Instances", "Container Instances"),
    "containerRegistry": _define("containers", "Container_Registries", "Container Registry", 64, 56),
    # networking
    "vnet": _define("networking", "Virtual_Networks", "Virtual Network", 64, 38),
    "hubVnet": _define("networking", "Virtual_Networks", "Hub Virtual Network", 64, 38),
    "subnet": _define("networking", "Subnet", "Subnet", 64, 38),
    "appGateway": _define("networking", "Application_Gateways", "Application Gateway"),
    "loadBalancer": _define("networking", "Load_Balancers", "Load Balancer"),
    "firewall": _define("networking", "Firewalls", "Azure Firewall", 64, 54),
    "bastion": _define("networking", "Bastions", "Azure Bastion", 58, 64),
    "vpnGateway": _define("networking", "Virtual_Network_Gateways", "VPN Gateway", 52, 64),
    "expressRoute": _define("networking", "ExpressRoute_Circuits", "ExpressRoute Circuit", 64, 56),
    "localNetworkGateway": _define("other", "Local_Network_Gateways", "Local Network Gateway"),
    "natGateway": _define("networking", "NAT", "NAT Gateway"),
    "nsg": _define("networking", "Network_Security_Groups", "Network Security Group", 56, 64),
    "routeTable": _define("networking", "Route_Tables", "Route Table", 64, 62),
    "publicIp": _define("networking", "Public_IP_Addresses", "Public IP Address", 64, 52),
    "privateEndpoint": _define("networking", "Private_Endpoint", "Private Endpoint", 64, 58),
    "privateLink": _define("networking", "Private_Link", "Private Link Service", 64, 36),
    "privateDnsZone": _define("networking", "DNS_Zones", "Private DNS Zone"),
    "dnsZone": _define("networking", "DNS_Zones", "DNS Zone"),
    "frontDoor": _define("networking", "Front_Doors", "Azure Front Door"),
    "trafficManager": _define("networking", "Traffic_Manager_Profiles", "Traffic Manager"),
    "ddosProtection": _define("networking", "DDoS_Protection_Plans", "DDoS Protection Plan", 56, 64),
    "virtualWan": _define("networking", "Virtual_WANs", "Virtual WAN"),
    # storage and databases
    "storageAccount": _define("storage", "Storage_Accounts", "Storage Account", 64, 52),
    "sqlServer": _define("databases", "SQL_Server", "SQL Server"),
    "sqlDatabase": _define("databases", "SQL_Database", "SQL Database", 48, 64),
    "sqlManagedInstance": _define("databases", "SQL_Managed_Instance", "SQL Managed Instance"),
    "cosmosDb": _define("databases", "Azure_Cosmos_DB", "Azure Cosmos DB"),
    "postgresql": _define("databases", "Azure_Database_PostgreSQL_Server", "PostgreSQL Server", 48, 64),
    "mysql": _define("databases", "Azure_Database_MySQL_Server", "MySQL Server", 48, 64),
    "redis": _define("databases", "Cache_Redis", "Azure Cache for Redis", 64, 52),
    # integration and analytics
    "apiManagement": _define("integration", "API_Management_Services", "API Management", 64, 60),
    "serviceBus": _define("integration", "Service_Bus", "Service Bus", 64, 56),
    "eventHub": _define("analytics", "Event_Hubs", "Event Hubs", 64, 56),
    "eventGrid": _define("integration", "Event_Grid_Topics", "Event Grid Topic"),
    "logicApp": _define("integration", "Logic_Apps", "Logic App", 64, 50),
    "dataFactory": _define("databases", "Data_Factory", "Data Factory"),
    "synapse": _define("analytics", "Azure_Synapse_Analytics", "Synapse Analytics", 64, 62),
    "databricks": _define("analytics", "Azure_Databricks", "Azure Databricks", 60, 64),
    # ai
    "openAI": _define("ai_machine_learning", "Azure_OpenAI", "Azure OpenAI"),
    "cognitiveServices": _define("ai_machine_learning", "Cognitive_Services", "Cognitive Services", 64, 46),
    "aiSearch": _define("app_services", "Search_Services", "Azure AI Search", 64, 56),
    "machineLearning": _define("ai_machine_learning", "Machine_Learning", "Machine Learning"),
    # security and identity
    "keyVault": _define("security", "Key_Vaults", "Key Vault"),
    "managedIdentity": _define("identity", "Managed_Identities", "Managed Identity", 52, 64),
    "entraId": _define("identity", "Azure_Active_Directory", "Microsoft Entra ID", 64, 62),
    "defender": _define("security", "Microsoft_Defender_for_Cloud", "Defender for Cloud", 56, 64),
    # management and monitoring
    "logAnalytics": _define("analytics", "Log_Analytics_Workspaces", "Log Analytics Workspace"),
    "appInsights": _define("devops", "Application_Insights", "Application Insights", 44, 64),
    "monitor": _define("management_governance", "Monitor", "Azure Monitor"),
    "recoveryVault": _define("management_governance", "Recovery_Services_Vaults", "Recovery Services Vault", 64, 56),
    "automation": _define("management_governance", "Automation_Accounts", "Automation Account"),
    # structural icons
    "subscription": _define("general", "Subscriptions", "Subscription", 44, 64),
    "resourceGroup": _define("general", "Resource_Groups", "Resource Group", 64, 52),
    "onPremises": _define("other", "On_Premises_Data_Gateways", "On-Premises", 64, 64),
    "server": _define("general", "Server_Farm", "Server"),
    "user": _define("general", "User", "User", 56, 64),
}

CONTAINER_STYLES: dict[str, str] = {
    "subscription": (
        "rounded=1;whiteSpace=wrap;html=1;fillColor=#FFFFFF;strokeColor=#0078D4;"
        "strokeWidth=2;verticalAlign=top;align=left;spacingLeft=60;fontStyle=1;"
        "fontSize=14;container=1;collapsible=0;"
    ),
    "region": (
        "rounded=1;whiteSpace=wrap;html=1;fillColor=#F0F6FC;strokeColor=#5C6BC0;"
        "dashed=1;verticalAlign=top;align=left;spacingLeft=10;fontStyle=1;"
        "fontSize=13;container=1;collapsible=0;"
    ),
    "resourceGroup": (
        "rounded=1;whiteSpace=wrap;html=1;fillColor=#F5F5F5;strokeColor=#999999;"
        "dashed=1;verticalAlign=top;align=left;spacingLeft=10;fontStyle=1;"
        "fontSize=12;container=1;collapsible=0;"
    ),
    "vnet": (
        "rounded=0;whiteSpace=wrap;html=1;fillColor=#E3F2FD;strokeColor=#1565C0;"
        "verticalAlign=top;align=left;spacingLeft=10;fontStyle=1;fontSize=12;"
        "container=1;collapsible=0;"
    ),
    "vnetHub": (
        "rounded=0;whiteSpace=wrap;html=1;fillColor=#E8EAF6;strokeColor=#283593;"
        "strokeWidth=2;verticalAlign=top;align=left;spacingLeft=10;fontStyle=1;"
        "fontSize=12;container=1;collapsible=0;"
    ),
    "subnet": (
        "rounded=0;whiteSpace=wrap;html=1;fillColor=#F1F8E9;strokeColor=#7CB342;"
        "dashed=1;verticalAlign=top;align=left;spacingLeft=8;fontSize=11;"
        "container=1;collapsible=0;"
    ),
    "availabilityZone": (
        "rounded=1;whiteSpace=wrap;html=1;fillColor=none;strokeColor=#FB8C00;"
        "dashed=1;dashPattern=4 4;verticalAlign=top;align=center;fontSize=10;"
        "fontColor=#FB8C00;container=1;collapsible=0;"
    ),
    "onPremises": (
        "rounded=1;whiteSpace=wrap;html=1;fillColor=#FAFAFA;strokeColor=#546E7A;"
        "strokeWidth=2;verticalAlign=top;align=left;spacingLeft=10;fontStyle=1;"
        "fontSize=13;container=1;collapsible=0;"
    ),
    "legend": (
        "rounded=1;whiteSpace=wrap;html=1;fillColor=#F5F5F5;strokeColor=#999999;"
        "dashed=1;verticalAlign=top;fontStyle=1;fontSize=12;container=1;collapsible=0;"
    ),
}

BASE_EDGE_STYLE = (
    "edgeStyle=orthogonalEdgeStyle;rounded=1;orthogonalLoop=1;jettySize=auto;html=1;"
    "endArrow=classic;endFill=1;fontSize=10;labelBackgroundColor=#FFFFFF;"
)

# Insertion order is the legend order.
CONNECTION_STYLES: dict[ConnectionStyle, ConnectionStyleConvention] = {
    ConnectionStyle.EXPRESSROUTE: ConnectionStyleConvention(
        style="strokeColor=#FF6600;strokeWidth=3;",
        legend_label="ExpressRoute",
        color="#FF6600",
        dashed=False,
    ),
    ConnectionStyle.VPN: ConnectionStyleConvention(
        style="strokeColor=#0066CC;strokeWidth=2;dashed=1;",
        legend_label="VPN",
        color="#0066CC",
        dashed=True,
    ),
    ConnectionStyle.PEERING: ConnectionStyleConvention(
        style="strokeColor=#009900;strokeWidth=2;endArrow=none;",
        legend_label="VNet Peering",
        color="#009900",
        dashed=False,
    ),
    ConnectionStyle.DASHED: ConnectionStyleConvention(
        style="dashed=1;",
        legend_label="Dashed",
        color="#666666",
        dashed=True,
    ),
}


def resource_definition(resource_type: str) -> ResourceDefinition | None:
    return RESOURCES.get(resource_type)


def edge_style(style: ConnectionStyle | None) -> str:
    convention = CONNECTION_STYLES.get(style) if style else None
    return BASE_EDGE_STYLE + (convention.style if convention else "")


def list_resources() -> list[tuple[str, ResourceDefinition]]:
    return sorted(RESOURCES.items(), key=lambda item: (item[1].category, item[1].display_name))
