from aws_cdk import (
    Annotations,
    Stack,
    SecretValue,
    pipelines,
    aws_iam as iam,
)
from constructs import Construct

from .pipeline_stage import ConfCdkPipelineStage, placeholder_message
from .settings import RestaurantSettings

# Build before testing because the tests synthesize the stacks, website asset included
SYNTH_COMMANDS = [
    # Install dependencies
    "npm install -g aws-cdk",
    "python -m pip install --upgrade pip",
    'python -m pip install -e ".[test]"',
    # Build
    "python -m compileall -q conf_cdk_restaurant modules",
    # Test
    "python -m pytest tests/unit -v",
    # Synthesize CloudFormation templates into cdk.out
    "cdk synth",
]


class ConfCdkPipelineStack(Stack):
    """
    Defines the CI/CD pipeline for the restaurant app.

    Pipeline Flow:
    1. Source: pull the repository on push to the configured branch
    2. Synth: install, build, unit test and `cdk synth` in CodeBuild
    3. UpdatePipeline: self-mutation when the pipeline definition changes
    4. Deploy: the ConfCdkPipelineStage (global, API and frontend stacks)

    A failing command stops the run at the Synth step, so nothing is deployed.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: RestaurantSettings,
        **kwargs,
    ) -> None:
        super().__init__(scope, f"{settings.subdomain}-{construct_id}", **kwargs)

        subdomain = settings.subdomain

        # SOURCE STAGE: GitHub Repository Integration
        # Documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.pipelines/CodePipelineSource.html#aws_cdk.pipelines.CodePipelineSource.git_hub
        source = pipelines.CodePipelineSource.git_hub(
            repo_string=settings.repo,
            branch=settings.branch,
            # GitHub token stored in AWS Secrets Manager
            authentication=SecretValue.secrets_manager(settings.github_token_secret),
        )

        # BUILD STAGE: install, build, test, synth
        # Documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.pipelines/CodeBuildStep.html
        synth_step = pipelines.CodeBuildStep(
            "Synth",
            input=source,
            commands=SYNTH_COMMANDS,
            # cdk synth resolves the hosted zone lookups through the bootstrap lookup role
            # Lookup role documentation: https://docs.aws.amazon.com/cdk/v2/guide/bootstrapping-env.html
            role_policy_statements=[
                iam.PolicyStatement(
                    actions=["sts:AssumeRole"],
                    resources=["*"],
                    conditions={
                        "StringEquals": {
                            "iam:ResourceTag/aws-cdk:bootstrap-role": "lookup"
                        }
                    }
                )
            ]
        )

        # PIPELINE DEFINITION
        # Documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.pipelines/CodePipeline.html
        self.pipeline = pipelines.CodePipeline(
            self, f"{subdomain}-ConfCdkPipeline",
            pipeline_name=f"{subdomain}-ConfCdkPipeline",
            synth=synth_step
        )

        # DEPLOY STAGE: only runs after a successful synth
        # Stage documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk/Stage.html
        self.stage = ConfCdkPipelineStage(
            self,
            f"{subdomain}-deployConfCdkStacks",
            settings=settings,
            env=kwargs.get("env")
        )
        self.pipeline.add_stage(self.stage)

        if settings.is_placeholder:
            Annotations.of(self).add_error(placeholder_message(settings))
