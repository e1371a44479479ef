from aws_cdk import Annotations, Environment, Stage
from constructs import Construct

from .api_stack import RestaurantApiStack
from .frontend_stack import RestaurantFrontendStack
from .global_stack import RestaurantGlobalStack
from .settings import RestaurantSettings


class ConfCdkPipelineStage(Stage):
    """
    Deployment stage for the restaurant app.

    Stacks are created in dependency order:
    1. Global stack (us-east-1): distribution certificate
    2. API stack: event and settings REST APIs
    3. Frontend stack: bucket, distribution and DNS record, consuming both

    Stack ids are prefixed with the subdomain so several deployers can share an account.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: RestaurantSettings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        subdomain = settings.subdomain

        # Certificate must live in us-east-1 for CloudFront, same account as the stage
        self.global_stack = RestaurantGlobalStack(
            self,
            f"{subdomain}-confCdkRestaurantGlobalStack",
            settings=settings,
            env=Environment(account=self.account, region=settings.certificate_region)
        )

        self.api_stack = RestaurantApiStack(
            self,
            f"{subdomain}-confCdkRestaurantApiStack",
            settings=settings
        )

        # Cross-region references carry the certificate ARN out of us-east-1
        # Documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk/StackProps.html#aws_cdk.StackProps.cross_region_references
        self.frontend_stack = RestaurantFrontendStack(
            self,
            f"{subdomain}-confCdkRestaurantFrontendStack",
            settings=settings,
            distribution_certificate=self.global_stack.distribution_certificate,
            event_api=self.api_stack.event_api,
            settings_api=self.api_stack.settings_api,
            cross_region_references=True
        )

        if settings.is_placeholder:
            for stack in (self.global_stack, self.api_stack, self.frontend_stack):
                Annotations.of(stack).add_error(placeholder_message(settings))


def placeholder_message(settings: RestaurantSettings) -> str:
    return (
        f"Subdomain is still the placeholder '{settings.subdomain}'. Set a unique "
        f"subdomain (e.g. your GitHub handle) with the 'subdomain' context value in "
        f"cdk.json before deploying, otherwise {settings.domain_name} will collide."
    )
