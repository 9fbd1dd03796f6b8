"""Tests for the synthesized AppsyncStack CloudFormation template."""

from __future__ import annotations

import json
import time
from pathlib import Path

import pytest
from aws_cdk import Stack
from aws_cdk.assertions import Match, Template

from appsync_aurora.app import build_app
from appsync_aurora.config.settings import DeploySettings

pytestmark = pytest.mark.synth


@pytest.fixture(scope="module")
def stack(tmp_path_factory: pytest.TempPathFactory) -> Stack:
    root = tmp_path_factory.mktemp("project")
    settings = DeploySettings.from_cli(
        project_root=root, account="123456789012", region="us-east-1"
    )
    app = build_app(settings, outdir=root / "cdk.out")
    return Stack.of(app.node.find_child("AppsyncStack"))


@pytest.fixture(scope="module")
def template(stack: Stack) -> Template:
    return Template.from_stack(stack)


def _logical_id(stack: Stack, *path: str) -> str:
    """Logical id of the CloudFormation resource behind a construct path."""
    construct = stack
    for part in path:
        construct = construct.node.find_child(part)
    return stack.get_logical_id(construct.node.default_child)  # type: ignore[arg-type]


class TestApi:
    def test_graphql_api(self, template: Template) -> None:
        template.resource_count_is("AWS::AppSync::GraphQLApi", 1)
        template.has_resource_properties(
            "AWS::AppSync::GraphQLApi",
            {
                "Name": "cdk-appsync-api",
                "AuthenticationType": "API_KEY",
                "XrayEnabled": True,
            },
        )

    def test_api_key(self, template: Template) -> None:
        template.resource_count_is("AWS::AppSync::ApiKey", 1)
        template.has_resource_properties("AWS::AppSync::ApiKey", {"Expires": Match.any_value()})

    def test_api_key_expires_in_a_year(self, template: Template) -> None:
        keys = template.find_resources("AWS::AppSync::ApiKey")
        expires = next(iter(keys.values()))["Properties"]["Expires"]
        # Module-scoped template: allow for the time the session has been running.
        assert abs(expires - (time.time() + 365 * 86400)) < 3600

    def test_schema_uploaded(self, template: Template) -> None:
        schemas = template.find_resources("AWS::AppSync::GraphQLSchema")
        assert len(schemas) == 1
        definition = next(iter(schemas.values()))["Properties"]["Definition"]
        assert "listItems: AWSJSON" in definition
        assert "deleteItem(id: Int!): AWSJSON" in definition


class TestDatabase:
    def test_vpc(self, template: Template) -> None:
        template.resource_count_is("AWS::EC2::VPC", 1)

    def test_generated_secret(self, template: Template) -> None:
        template.has_resource_properties(
            "AWS::SecretsManager::Secret",
            {
                "GenerateSecretString": {
                    "SecretStringTemplate": json.dumps({"username": "admin"}),
                    "GenerateStringKey": "password",
                    "PasswordLength": 16,
                    "ExcludeCharacters": '"@/\\',
                }
            },
        )

    def test_serverless_cluster(self, template: Template) -> None:
        template.has_resource_properties(
            "AWS::RDS::DBCluster",
            {
                "Engine": "aurora-mysql",
                "EngineMode": "serverless",
                "DBClusterIdentifier": "ac-sdk-test",
                "DatabaseName": "ac",
            },
        )

    def test_data_source(self, template: Template) -> None:
        template.has_resource_properties(
            "AWS::AppSync::DataSource",
            {
                "Type": "RELATIONAL_DATABASE",
                "RelationalDatabaseConfig": Match.object_like(
                    {"RelationalDatabaseSourceType": "RDS_HTTP_ENDPOINT"}
                ),
            },
        )

    def test_data_source_uses_aurora_secret(self, stack: Stack, template: Template) -> None:
        secret_id = _logical_id(stack, "AuroraSecret")
        sources = template.find_resources("AWS::AppSync::DataSource")
        config = next(iter(sources.values()))["Properties"]["RelationalDatabaseConfig"]
        assert config["RdsHttpEndpointConfig"]["AwsSecretStoreArn"] == {"Ref": secret_id}

    def test_cluster_has_its_own_admin_secret(self, stack: Stack, template: Template) -> None:
        cluster_secret_id = _logical_id(stack, "AuroraCluster", "Secret")
        assert cluster_secret_id != _logical_id(stack, "AuroraSecret")
        secrets = template.find_resources("AWS::SecretsManager::Secret")
        assert len(secrets) == 2
        generated = secrets[cluster_secret_id]["Properties"]["GenerateSecretString"]
        assert json.loads(generated["SecretStringTemplate"]) == {"username": "admin"}

        clusters = template.find_resources("AWS::RDS::DBCluster")
        master_username = next(iter(clusters.values()))["Properties"]["MasterUsername"]
        assert {"Ref": cluster_secret_id} in master_username["Fn::Join"][1]
        assert ":SecretString:username::}}" in master_username["Fn::Join"][1]


class TestResolvers:
    def test_four_resolvers(self, template: Template) -> None:
        template.resource_count_is("AWS::AppSync::Resolver", 4)

    @pytest.mark.parametrize(
        ("type_name", "field_name", "sql"),
        [
            ("Query", "listItems", "SELECT * FROM ac"),
            ("Mutation", "createItem", "INSERT INTO ac (name) VALUES ('$ctx.args.name')"),
            (
                "Mutation",
                "updateItem",
                "UPDATE ac SET name = '$ctx.args.name' WHERE id = $ctx.args.id",
            ),
            ("Mutation", "deleteItem", "DELETE FROM ac WHERE id = $ctx.args.id"),
        ],
    )
    def test_resolver_templates(
        self, template: Template, type_name: str, field_name: str, sql: str
    ) -> None:
        resolvers = template.find_resources(
            "AWS::AppSync::Resolver",
            {"Properties": {"TypeName": type_name, "FieldName": field_name}},
        )
        assert len(resolvers) == 1
        props = next(iter(resolvers.values()))["Properties"]
        request = json.loads(props["RequestMappingTemplate"])
        assert request["operation"] == "Invoke"
        assert request["payload"]["sql"] == sql
        assert "$util.toJson($ctx.result)" in props["ResponseMappingTemplate"]


class TestOutputs:
    def test_outputs(self, template: Template) -> None:
        outputs = template.to_json()["Outputs"]
        assert "GraphQLAPIURL" in outputs
        assert "AuroraClusterEndpoint" in outputs
        template.has_output(
            "AuroraClusterEndpoint",
            {"Value": {"Fn::GetAtt": [Match.string_like_regexp("AuroraCluster"), "Endpoint.Address"]}},
        )


class TestConfiguredStack:
    def test_overrides_flow_into_template(self, tmp_path: Path) -> None:
        (tmp_path / "appsync.toml").write_text(
            'stack_id = "ItemsStack"\n'
            '[api]\nname = "items-api"\nxray_enabled = false\n'
            '[cluster]\nidentifier = "items-cluster"\n'
            '[mapping]\ntable = "items"\n'
        )
        settings = DeploySettings.from_cli(project_root=tmp_path)
        app = build_app(settings, outdir=tmp_path / "cdk.out")
        template = Template.from_stack(app.node.find_child("ItemsStack"))
        template.has_resource_properties(
            "AWS::AppSync::GraphQLApi", {"Name": "items-api", "XrayEnabled": False}
        )
        template.has_resource_properties(
            "AWS::RDS::DBCluster", {"DBClusterIdentifier": "items-cluster"}
        )
        template.has_resource_properties(
            "AWS::AppSync::Resolver",
            {"FieldName": "listItems", "RequestMappingTemplate": Match.string_like_regexp("FROM items")},
        )

    def test_api_key_expiry_override(self, tmp_path: Path) -> None:
        (tmp_path / "appsync.toml").write_text("[api]\napi_key_expiry_days = 30\n")
        settings = DeploySettings.from_cli(project_root=tmp_path)
        before = time.time()
        app = build_app(settings, outdir=tmp_path / "cdk.out")
        after = time.time()
        template = Template.from_stack(Stack.of(app.node.find_child("AppsyncStack")))
        keys = template.find_resources("AWS::AppSync::ApiKey")
        expires = next(iter(keys.values()))["Properties"]["Expires"]
        assert before + 30 * 86400 - 1 <= expires <= after + 30 * 86400 + 1
