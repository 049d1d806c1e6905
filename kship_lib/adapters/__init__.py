"""
Default adapters for the external collaborator protocols in kship_lib.any.protocols.

- files: FileSystemSource (FileSource)
- kubectl: KubectlManifestClient (ManifestObjectClient)
- session: TeleportSession, InClusterSession (SessionAdapter)
- templates: JinjaTemplateRenderer (TemplateRenderer)
"""
