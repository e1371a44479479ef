from aws_cdk import (
    Stack,
    CfnOutput,
    aws_certificatemanager as acm,
    aws_route53 as route53,
)
from constructs import Construct

from .settings import RestaurantSettings


class RestaurantGlobalStack(Stack):
    """
    Region-pinned resources shared with the other stacks of the stage.

    CloudFront only binds certificates issued in us-east-1, so this stack must be
    deployed there regardless of where the frontend lives. The frontend reads
    `distribution_certificate` through a cross-region reference.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: RestaurantSettings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Existing hosted zone, used to publish the DNS validation records
        # HostedZone.from_lookup documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_route53/HostedZone.html#aws_cdk.aws_route53.HostedZone.from_lookup
        hosted_zone = route53.HostedZone.from_lookup(
            self, "ParentHostedZone",
            domain_name=settings.parent_domain
        )

        # TLS certificate for <subdomain>.<parent-domain>, validated via DNS
        # Certificate documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_certificatemanager/Certificate.html
        self.distribution_certificate = acm.Certificate(
            self, "DistributionCertificate",
            domain_name=settings.domain_name,
            validation=acm.CertificateValidation.from_dns(hosted_zone)
        )

        CfnOutput(
            self, "CertificateArn",
            value=self.distribution_certificate.certificate_arn,
            description=f"ACM certificate for {settings.domain_name}"
        )
