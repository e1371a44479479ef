"""
Restaurant Frontend Stack
Static website hosting with a CloudFront distribution in front of the APIs

AWS Services Used:
- Amazon S3: private bucket holding the built website
  Documentation: https://docs.aws.amazon.com/AmazonS3/latest/userguide/Welcome.html
- Amazon CloudFront: CDN serving the bucket and routing /api/* paths to API Gateway
  Documentation: https://docs.aws.amazon.com/AmazonCloudFront/latest/DeveloperGuide/Introduction.html
- Amazon Route 53: alias record for <subdomain>.<parent-domain>
  Documentation: https://docs.aws.amazon.com/Route53/latest/DeveloperGuide/Welcome.html

Request routing:
- /                -> S3 bucket (through an origin access identity)
- /api/restaurant  -> event API
- /api/settings    -> settings API
"""

from aws_cdk import (
    Stack,
    RemovalPolicy,
    CfnOutput,
    aws_s3 as s3,
    aws_s3_deployment as s3_deployment,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_certificatemanager as acm,
    aws_apigateway as apigateway,
    aws_route53 as route53,
    aws_route53_targets as route53_targets,
)
from constructs import Construct

from modules.constants import EVENTS_PATH, SETTINGS_PATH
from .settings import RestaurantSettings


class RestaurantFrontendStack(Stack):
    """
    Declares the website bucket, its deployment, the distribution and the DNS record.

    The hosted zone lookup runs first. An environment-agnostic stack cannot look
    the zone up and raises during construction. In a concrete account a missing
    zone does not raise: the lookup attaches a ContextProviderError annotation to
    this stack, and the cdk CLI refuses to synthesize it.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: RestaurantSettings,
        distribution_certificate: acm.ICertificate,
        event_api: apigateway.RestApiBase,
        settings_api: apigateway.RestApiBase,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Point to existing hosted zone
        # HostedZone.from_lookup documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_route53/HostedZone.html#aws_cdk.aws_route53.HostedZone.from_lookup
        hosted_zone = route53.HostedZone.from_lookup(
            self, "ParentHostedZone",
            domain_name=settings.parent_domain
        )

        # ========================================================================
        # S3 BUCKET: website contents
        # ========================================================================
        # Bucket documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_s3/Bucket.html
        self.bucket = s3.Bucket(
            self, "WebsiteBucket",
            bucket_name=settings.domain_name,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            # Bucket and contents go away with the stack
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True
        )

        # Upload the website, replacing whatever the previous deployment left
        # BucketDeployment documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_s3_deployment/BucketDeployment.html
        s3_deployment.BucketDeployment(
            self, "WebsiteDeployment",
            destination_bucket=self.bucket,
            sources=[s3_deployment.Source.asset(settings.website_dir)],
            retain_on_delete=False
        )

        # Only this identity may read the bucket; there is no public access
        # OriginAccessIdentity documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_cloudfront/OriginAccessIdentity.html
        origin_access_identity = cloudfront.OriginAccessIdentity(
            self, "WebsiteOriginAccessIdentity",
            comment=f"Read access to {settings.domain_name}"
        )
        self.bucket.grant_read(origin_access_identity)

        # ========================================================================
        # CLOUDFRONT DISTRIBUTION
        # ========================================================================
        # Distribution documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_cloudfront/Distribution.html
        self.distribution = cloudfront.Distribution(
            self, "Distribution",
            default_root_object="index.html",
            default_behavior=cloudfront.BehaviorOptions(
                origin=origins.S3BucketOrigin.with_origin_access_identity(
                    self.bucket,
                    origin_access_identity=origin_access_identity
                ),
                # Caching is off; stale content is cleared by redeploying, not by cache headers
                cache_policy=cloudfront.CachePolicy.CACHING_DISABLED,
            ),
            domain_names=[settings.domain_name],
            certificate=distribution_certificate,
            additional_behaviors={
                EVENTS_PATH: self._api_behavior(event_api),
                SETTINGS_PATH: self._api_behavior(settings_api),
            }
        )

        # ========================================================================
        # ROUTE 53: <subdomain>.<parent-domain>. -> distribution
        # ========================================================================
        # ARecord documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_route53/ARecord.html
        self.alias_record = route53.ARecord(
            self, "AliasRecord",
            record_name=settings.record_name,
            zone=hosted_zone,
            target=route53.RecordTarget.from_alias(
                route53_targets.CloudFrontTarget(self.distribution)
            )
        )

        # Destroy distribution on stack removal
        self.distribution.apply_removal_policy(RemovalPolicy.DESTROY)

        # ========================================================================
        # CLOUDFORMATION OUTPUTS
        # ========================================================================
        CfnOutput(
            self, "BucketName",
            value=self.bucket.bucket_name,
            description="S3 bucket holding the website"
        )
        CfnOutput(
            self, "DistributionId",
            value=self.distribution.distribution_id,
            description="CloudFront distribution id, for cache invalidations"
        )
        CfnOutput(
            self, "DistributionDomainName",
            value=self.distribution.distribution_domain_name
        )
        CfnOutput(
            self, "WebsiteUrl",
            value=f"https://{settings.domain_name}"
        )

    @staticmethod
    def _api_behavior(api: apigateway.RestApiBase) -> cloudfront.BehaviorOptions:
        # RestApiOrigin documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_cloudfront_origins/RestApiOrigin.html
        return cloudfront.BehaviorOptions(
            origin=origins.RestApiOrigin(api),
            allowed_methods=cloudfront.AllowedMethods.ALLOW_ALL,
            # API responses are never cached
            cache_policy=cloudfront.CachePolicy.CACHING_DISABLED,
        )
