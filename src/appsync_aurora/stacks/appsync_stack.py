"""AppsyncStack: AppSync GraphQL API backed by an Aurora Serverless cluster."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from aws_cdk import CfnOutput, Duration, Expiration, Stack
from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_rds as rds
from aws_cdk import aws_secretsmanager as secretsmanager

from appsync_aurora.mapping.resolvers import RESOLVERS

if TYPE_CHECKING:
    from pathlib import Path

    from constructs import Construct

    from appsync_aurora.config.models import DeployConfig
    from appsync_aurora.mapping.resolvers import MappingTemplates

logger = logging.getLogger(__name__)


class AppsyncStack(Stack):
    """One GraphQL API, its database cluster, and the resolvers between them.

    Resources, by construct id:

    * ``Api``: GraphQL API with API-key authorization and X-Ray tracing.
    * ``AuroraVpc``: VPC with default parameters.
    * ``AuroraSecret``: generated database credential.
    * ``AuroraCluster``: Aurora MySQL serverless cluster.
    * ``AuroraDataSource``: RDS data source binding API, cluster and secret.
    * one resolver per entry in :data:`~appsync_aurora.mapping.resolvers.RESOLVERS`.

    Outputs ``GraphQLAPIURL`` and ``AuroraClusterEndpoint``.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        config: DeployConfig,
        schema_path: Path,
        templates: MappingTemplates,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.api = appsync.GraphqlApi(
            self,
            "Api",
            name=config.api.name,
            definition=appsync.Definition.from_file(str(schema_path)),
            authorization_config=appsync.AuthorizationConfig(
                default_authorization=appsync.AuthorizationMode(
                    authorization_type=appsync.AuthorizationType.API_KEY,
                    api_key_config=appsync.ApiKeyConfig(
                        expires=Expiration.after(Duration.days(config.api.api_key_expiry_days)),
                    ),
                ),
            ),
            xray_enabled=config.api.xray_enabled,
        )

        self.vpc = ec2.Vpc(self, "AuroraVpc")

        self.secret = secretsmanager.Secret(
            self,
            "AuroraSecret",
            generate_secret_string=secretsmanager.SecretStringGenerator(
                secret_string_template=json.dumps({"username": config.secret.username}),
                generate_string_key=config.secret.generate_string_key,
                password_length=config.secret.password_length,
                exclude_characters=config.secret.exclude_characters,
            ),
        )

        self.cluster = rds.ServerlessCluster(
            self,
            "AuroraCluster",
            engine=rds.DatabaseClusterEngine.AURORA_MYSQL,
            vpc=self.vpc,
            credentials=rds.Credentials.from_username(config.cluster.username),
            cluster_identifier=config.cluster.identifier,
            default_database_name=config.cluster.default_database_name,
        )

        self.data_source = self.api.add_rds_data_source(
            "AuroraDataSource", self.cluster, self.secret
        )

        self.resolvers: dict[str, appsync.Resolver] = {}
        for spec in RESOLVERS:
            self.resolvers[spec.construct_id] = self.data_source.create_resolver(
                spec.construct_id,
                type_name=spec.type_name,
                field_name=spec.field_name,
                request_mapping_template=appsync.MappingTemplate.from_string(
                    templates.request(spec)
                ),
                response_mapping_template=appsync.MappingTemplate.from_string(
                    templates.response(spec)
                ),
            )
            logger.debug("Declared resolver %s as %s", spec.path, spec.construct_id)

        CfnOutput(self, "GraphQLAPIURL", value=self.api.graphql_url)
        CfnOutput(self, "AuroraClusterEndpoint", value=self.cluster.cluster_endpoint.hostname)
